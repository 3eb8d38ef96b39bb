import pytest

from eduverse.application.errors import AuthorizationError, NotFoundError, ValidationError
from eduverse.application.services.notice_service import (
    create_notice,
    delete_notice,
    list_visible_notices,
    serialize_notice,
    update_notice,
)
from eduverse.domain.notice_enums import NoticeAudience, NoticePriority
from eduverse.interfaces.api.v1.schemas.notice import NoticeCreate, NoticeUpdate
from tests.helpers.factories import at, create_notice as factory_create_notice
from tests.helpers.factories import get_notice


def test_create_notice_defaults_category_and_validates_fields(db_session, seeded_users):
    """
    Validate notice creation.

    1. Create a notice without a category.
    2. Validate category defaults to General and the author is recorded.
    3. Create a notice with a blank required field.
    4. Validate unknown audience and priority values are rejected.
    """
    notice = create_notice(
        db_session,
        author=seeded_users["teacher"],
        payload=NoticeCreate(title="Exam week", content="Bring pencils", audience="Students", priority="High"),
    )
    assert notice.category == "General"
    assert notice.author_id == seeded_users["teacher"].id
    assert serialize_notice(notice)["author"]["name"] == "Sarah Teacher"

    with pytest.raises(ValidationError) as missing:
        create_notice(
            db_session,
            author=seeded_users["teacher"],
            payload=NoticeCreate(title=" ", content="x", audience="Students", priority="High"),
        )
    assert str(missing.value) == "Please provide all required fields: title, content, audience, priority."

    with pytest.raises(ValidationError):
        create_notice(
            db_session,
            author=seeded_users["teacher"],
            payload=NoticeCreate(title="t", content="x", audience="Parents", priority="High"),
        )
    with pytest.raises(ValidationError):
        create_notice(
            db_session,
            author=seeded_users["teacher"],
            payload=NoticeCreate(title="t", content="x", audience="Everyone", priority="Urgent"),
        )


def test_list_visible_notices_scopes_audience_and_orders_pinned_first(db_session, seeded_users):
    """
    Validate notice listing scope and ordering.

    1. Seed notices for every audience, one old pinned notice and newer unpinned ones.
    2. List as student, teacher and admin.
    3. Validate each role only sees its audience tiers.
    4. Validate pinned notices precede newer unpinned ones.
    """
    author_id = seeded_users["admin"].id
    pinned = factory_create_notice(
        db_session, author_id=author_id, title="Pinned", is_pinned=True, created_at=at(2026, 1, 1)
    )
    everyone = factory_create_notice(db_session, author_id=author_id, title="Everyone", created_at=at(2026, 2, 1))
    students = factory_create_notice(
        db_session, author_id=author_id, title="Students", audience=NoticeAudience.students, created_at=at(2026, 3, 1)
    )
    teachers = factory_create_notice(
        db_session,
        author_id=author_id,
        title="Teachers",
        audience=NoticeAudience.teachers,
        priority=NoticePriority.low,
        created_at=at(2026, 4, 1),
    )

    student_view = list_visible_notices(db_session, caller=seeded_users["student"])
    assert [notice.id for notice in student_view] == [pinned.id, students.id, everyone.id]

    teacher_view = list_visible_notices(db_session, caller=seeded_users["teacher"])
    assert [notice.id for notice in teacher_view] == [pinned.id, teachers.id, everyone.id]

    admin_view = list_visible_notices(db_session, caller=seeded_users["admin"])
    assert [notice.id for notice in admin_view] == [pinned.id, teachers.id, students.id, everyone.id]

    staff_view = list_visible_notices(db_session, caller=seeded_users["staff"])
    assert [notice.id for notice in staff_view] == [pinned.id, everyone.id]


def test_update_and_delete_notice_enforce_authorship(db_session, seeded_users):
    """
    Validate notice edits are limited to the author or an admin.

    1. Seed a notice authored by the teacher.
    2. Update it as the author and validate changed fields.
    3. Validate another non-admin user is forbidden and unknown ids are not found.
    4. Delete it as admin and validate it is gone.
    """
    notice = factory_create_notice(db_session, author_id=seeded_users["teacher"].id, title="Field trip")

    updated = update_notice(
        db_session,
        caller=seeded_users["teacher"],
        notice_id=notice.id,
        payload=NoticeUpdate(title="Field trip moved", isPinned=True, priority="High"),
    )
    assert updated.title == "Field trip moved"
    assert updated.is_pinned is True
    assert updated.priority == "High"

    with pytest.raises(AuthorizationError) as exc:
        update_notice(db_session, caller=seeded_users["accountant"], notice_id=notice.id, payload=NoticeUpdate(title="x"))
    assert str(exc.value) == "Not authorized to update this notice"

    with pytest.raises(NotFoundError):
        delete_notice(db_session, caller=seeded_users["admin"], notice_id=999999)

    delete_notice(db_session, caller=seeded_users["admin"], notice_id=notice.id)
    assert get_notice(db_session, notice.id) is None
