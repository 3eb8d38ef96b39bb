from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eduverse.application.services.ledger_service import invoice_status_for
from eduverse.application.services.security_service import hash_password
from eduverse.application.services.user_service import default_avatar_url
from eduverse.domain.notice_enums import NoticeAudience, NoticePriority
from eduverse.domain.payment_method import PaymentMethod
from eduverse.domain.roles import UserRole
from eduverse.infrastructure.db.models import (
    Invoice,
    Notice,
    Payment,
    SchoolClass,
    StudentClassEnrollment,
    User,
)
from eduverse.infrastructure.db.session import SessionLocal
from eduverse.infrastructure.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    ("System Administrator", "admin@eduversepro.com", "admin123", UserRole.admin),
    ("Sarah Johnson", "teacher@eduversepro.com", "teacher123", UserRole.teacher),
    ("Robert Martinez", "accountant@eduversepro.com", "accountant123", UserRole.accountant),
    ("John Doe", "staff@example.com", "staff123", UserRole.staff),
    ("Emma Wilson", "student@eduversepro.com", "student123", UserRole.student),
    ("Liam Smith", "liam@example.com", "student123", UserRole.student),
    ("Olivia Brown", "olivia@example.com", "student123", UserRole.student),
]

DEMO_CLASSES = [
    ("Class 6", "Primary School Grade 6"),
    ("Class 7", "Primary School Grade 7"),
    ("Class 8", "Junior High School Grade 8"),
]


def create_user_if_missing(db: Session, name: str, email: str, password: str, role: UserRole) -> User:
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing is not None:
        return existing

    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role.value,
        avatar=default_avatar_url(name),
    )
    db.add(user)
    db.flush()
    return user


def create_class_if_missing(db: Session, name: str, description: str, teacher_id: int) -> SchoolClass:
    school_class = db.execute(select(SchoolClass).where(SchoolClass.name == name)).scalar_one_or_none()
    if school_class is not None:
        return school_class

    school_class = SchoolClass(name=name, description=description, teacher_id=teacher_id)
    db.add(school_class)
    db.flush()
    return school_class


def enroll_student_if_missing(db: Session, student_id: int, class_id: int) -> None:
    existing = db.execute(
        select(StudentClassEnrollment).where(
            StudentClassEnrollment.student_id == student_id,
            StudentClassEnrollment.class_id == class_id,
        )
    ).scalar_one_or_none()
    if existing is not None:
        return
    db.add(StudentClassEnrollment(student_id=student_id, class_id=class_id))


def create_notice_if_missing(
    db: Session,
    *,
    author_id: int,
    title: str,
    content: str,
    audience: NoticeAudience,
    priority: NoticePriority,
    is_pinned: bool = False,
) -> None:
    existing = db.execute(select(Notice).where(Notice.title == title)).scalar_one_or_none()
    if existing is not None:
        return
    db.add(
        Notice(
            title=title,
            content=content,
            audience=audience.value,
            priority=priority.value,
            is_pinned=is_pinned,
            author_id=author_id,
        )
    )


def seed_invoice(
    db: Session,
    *,
    student: User,
    description: str,
    amount: Decimal,
    due_date: date,
    payments: list[tuple[Decimal, PaymentMethod]],
) -> None:
    existing = db.execute(
        select(Invoice).where(Invoice.student_id == student.id, Invoice.description == description)
    ).scalar_one_or_none()
    if existing is not None:
        return

    invoice = Invoice(student_id=student.id, description=description, amount=amount, due_date=due_date)
    db.add(invoice)
    db.flush()
    for index, (paid, method) in enumerate(payments, start=1):
        db.add(
            Payment(
                invoice_id=invoice.id,
                amount_paid=paid,
                payment_method=method.value,
                transaction_id=f"SEED-{invoice.id}-{index}",
            )
        )
    db.flush()
    paid_total = db.execute(
        select(func.coalesce(func.sum(Payment.amount_paid), 0)).where(Payment.invoice_id == invoice.id)
    ).scalar_one()
    invoice.status = invoice_status_for(amount, Decimal(paid_total))


def main() -> None:
    configure_logging()
    db = SessionLocal()
    try:
        users = {
            email: create_user_if_missing(db=db, name=name, email=email, password=password, role=role)
            for name, email, password, role in DEMO_USERS
        }
        teacher = users["teacher@eduversepro.com"]
        admin = users["admin@eduversepro.com"]
        classes = [
            create_class_if_missing(db=db, name=name, description=description, teacher_id=teacher.id)
            for name, description in DEMO_CLASSES
        ]
        students = [user for user in users.values() if user.role == UserRole.student.value]
        for student in students:
            enroll_student_if_missing(db=db, student_id=student.id, class_id=classes[-1].id)

        create_notice_if_missing(
            db=db,
            author_id=admin.id,
            title="Welcome to the new term",
            content="Classes resume on Monday. Check the timetable on the portal.",
            audience=NoticeAudience.everyone,
            priority=NoticePriority.high,
            is_pinned=True,
        )
        create_notice_if_missing(
            db=db,
            author_id=teacher.id,
            title="Science fair projects",
            content="Project proposals are due by Friday.",
            audience=NoticeAudience.students,
            priority=NoticePriority.medium,
        )
        create_notice_if_missing(
            db=db,
            author_id=admin.id,
            title="Staff meeting",
            content="All teachers meet in the library at 3 PM on Wednesday.",
            audience=NoticeAudience.teachers,
            priority=NoticePriority.low,
        )

        today = date.today()
        emma, liam, olivia = students
        # One student per fee status: Paid, Partial, Overdue.
        seed_invoice(
            db=db,
            student=emma,
            description="Monthly Tuition",
            amount=Decimal("500.00"),
            due_date=today + timedelta(days=20),
            payments=[(Decimal("500.00"), PaymentMethod.credit_card)],
        )
        seed_invoice(
            db=db,
            student=liam,
            description="Monthly Tuition",
            amount=Decimal("500.00"),
            due_date=today + timedelta(days=20),
            payments=[(Decimal("200.00"), PaymentMethod.cash)],
        )
        seed_invoice(
            db=db,
            student=olivia,
            description="Lab Fee",
            amount=Decimal("120.00"),
            due_date=today - timedelta(days=10),
            payments=[],
        )

        db.commit()
        logger.info("seed_completed", users=len(users), classes=len(classes))
    finally:
        db.close()


if __name__ == "__main__":
    main()
