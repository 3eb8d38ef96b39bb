from dataclasses import dataclass
from enum import Enum

from eduverse.domain.notice_enums import NoticeAudience


class UserRole(str, Enum):
    admin = "admin"
    teacher = "teacher"
    student = "student"
    accountant = "accountant"
    clerk = "clerk"
    librarian = "librarian"
    staff = "staff"


@dataclass(frozen=True)
class RoleCapabilities:
    """What a role may see and do, looked up instead of branching on role names."""

    notice_audiences: frozenset[NoticeAudience]
    sees_all_invoices: bool = False
    sees_own_invoices: bool = False
    manages_finance: bool = False
    manages_notices: bool = False
    manages_users: bool = False
    lists_users: bool = False


ALL_AUDIENCES = frozenset(NoticeAudience)

ROLE_CAPABILITIES: dict[UserRole, RoleCapabilities] = {
    UserRole.admin: RoleCapabilities(
        notice_audiences=ALL_AUDIENCES,
        sees_all_invoices=True,
        manages_finance=True,
        manages_notices=True,
        manages_users=True,
        lists_users=True,
    ),
    UserRole.accountant: RoleCapabilities(
        notice_audiences=ALL_AUDIENCES,
        sees_all_invoices=True,
        manages_finance=True,
        lists_users=True,
    ),
    UserRole.teacher: RoleCapabilities(
        notice_audiences=frozenset({NoticeAudience.everyone, NoticeAudience.teachers}),
        manages_notices=True,
    ),
    UserRole.student: RoleCapabilities(
        notice_audiences=frozenset({NoticeAudience.everyone, NoticeAudience.students}),
        sees_own_invoices=True,
    ),
    UserRole.clerk: RoleCapabilities(notice_audiences=frozenset({NoticeAudience.everyone})),
    UserRole.librarian: RoleCapabilities(notice_audiences=frozenset({NoticeAudience.everyone})),
    UserRole.staff: RoleCapabilities(notice_audiences=frozenset({NoticeAudience.everyone})),
}

NO_CAPABILITIES = RoleCapabilities(notice_audiences=frozenset())


def capabilities_for(role: str) -> RoleCapabilities:
    try:
        return ROLE_CAPABILITIES[UserRole(role)]
    except ValueError:
        return NO_CAPABILITIES
