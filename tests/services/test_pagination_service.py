from sqlalchemy import select

from eduverse.application.services.pagination_service import normalize_search, paginate_scalars
from eduverse.domain.roles import UserRole
from eduverse.infrastructure.db.models import User
from tests.helpers.factories import create_user


def _seed_students(db_session) -> None:
    create_user(db_session, "Page One", "page-one@example.com", UserRole.student)
    create_user(db_session, "Page Two", "page-two@example.com", UserRole.student)
    create_user(db_session, "Needle Three", "needle@example.com", UserRole.student)


def test_paginate_scalars_returns_totals_without_search(db_session):
    """
    Validate paginate_scalars count metadata without search.

    1. Seed three users in database.
    2. Call paginate_scalars with offset zero and limit two.
    3. Validate first page item count follows limit.
    4. Validate total and filtered_total are identical.
    """
    _seed_students(db_session)
    items, meta = paginate_scalars(
        db=db_session,
        base_query=select(User).where(User.deleted_at.is_(None)).order_by(User.id),
        offset=0,
        limit=2,
        search=None,
        search_columns=[User.name, User.email],
    )
    assert len(items) == 2
    assert meta.total == 3
    assert meta.filtered_total == 3
    assert meta.has_next is True


def test_paginate_scalars_applies_search_to_configured_columns(db_session):
    """
    Validate paginate_scalars declarative search behavior.

    1. Seed one matching and two non-matching users.
    2. Call paginate_scalars with search term once.
    3. Validate only matching user is returned.
    4. Validate filtered_total reflects search subset.
    """
    _seed_students(db_session)
    items, meta = paginate_scalars(
        db=db_session,
        base_query=select(User).where(User.deleted_at.is_(None)).order_by(User.id),
        offset=0,
        limit=10,
        search="NEEDLE",
        search_columns=[User.name, User.email],
    )
    assert [item.email for item in items] == ["needle@example.com"]
    assert meta.total == 3
    assert meta.filtered_total == 1


def test_paginate_scalars_sets_navigation_flags_for_middle_page(db_session):
    """
    Validate paginate_scalars page navigation metadata.

    1. Seed three users in database.
    2. Call paginate_scalars requesting second page with limit one.
    3. Validate has_prev and has_next are both true.
    4. Validate current_page and filtered_total_pages values.
    """
    _seed_students(db_session)
    _, meta = paginate_scalars(
        db=db_session,
        base_query=select(User).where(User.deleted_at.is_(None)).order_by(User.id),
        offset=1,
        limit=1,
        search=None,
        search_columns=[User.name],
    )
    assert meta.has_prev is True
    assert meta.has_next is True
    assert meta.current_page == 2
    assert meta.filtered_total_pages == 3


def test_paginate_scalars_requires_every_search_term_to_match(db_session):
    """
    Validate multi-term search narrows across name and email.

    1. Seed three users sharing the "Page" name prefix on two of them.
    2. Search with two terms split by irregular whitespace.
    3. Validate only the user matching both terms is returned.
    """
    _seed_students(db_session)
    items, meta = paginate_scalars(
        db=db_session,
        base_query=select(User).where(User.deleted_at.is_(None)).order_by(User.id),
        offset=0,
        limit=10,
        search=normalize_search("  page   TWO "),
        search_columns=[User.name, User.email],
    )
    assert [item.email for item in items] == ["page-two@example.com"]
    assert meta.filtered_total == 1


def test_normalize_search_collapses_whitespace_and_blank_input():
    assert normalize_search(None) is None
    assert normalize_search("   ") is None
    assert normalize_search(" emma \t wilson ") == "emma wilson"
