"""SQLAlchemy implementation of SubscriptionStore.

Works against any SQLAlchemy-supported database; SQLite is the default and
PostgreSQL is used in production. Name uniqueness is enforced by the
table's unique constraint, so concurrent writers racing on one name get
exactly one success.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import Engine, func, or_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from subscription_catalog.database import build_engine, build_session_factory, init_db
from subscription_catalog.entities import (
    Page,
    PageRequest,
    SortDirection,
    SubscriptionDraft,
    SubscriptionEntity,
    SubscriptionStatus,
)
from subscription_catalog.errors import InvalidQueryError, SubscriptionConflictError, SubscriptionNotFoundError
from subscription_catalog.models import SubscriptionRecord

logger = logging.getLogger(__name__)

# API field name -> column
SORTABLE_FIELDS = {
    "id": SubscriptionRecord.id,
    "name": SubscriptionRecord.name,
    "price": SubscriptionRecord.price,
    "currency": SubscriptionRecord.currency,
    "category": SubscriptionRecord.category,
    "billingPeriod": SubscriptionRecord.billing_period,
    "isActive": SubscriptionRecord.is_active,
    "createdAt": SubscriptionRecord.created_at,
    "updatedAt": SubscriptionRecord.updated_at,
}


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_entity(record: SubscriptionRecord) -> SubscriptionEntity:
    return SubscriptionEntity(
        id=record.id,
        name=record.name,
        description=record.description,
        price=record.price,
        currency=record.currency,
        category=record.category,
        billing_period=record.billing_period,
        website_url=record.website_url,
        logo_url=record.logo_url,
        status=SubscriptionStatus.from_flag(record.is_active),
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


class SqlAlchemySubscriptionRepository:
    """Relational subscription store.

    This class satisfies the SubscriptionStore protocol through structural
    typing - no explicit inheritance needed. Each public method opens its
    own session and transaction.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the repository.

        Args:
            session_factory: Factory producing sessions bound to the catalog database.
        """
        self._session_factory = session_factory

    @classmethod
    def create(cls, engine: Engine | None = None, create_tables: bool = True) -> "SqlAlchemySubscriptionRepository":
        """Factory method to create the repository with defaults.

        Args:
            engine: Engine to bind to. If None, builds one from settings.
            create_tables: Create missing tables before returning.

        Returns:
            Configured SqlAlchemySubscriptionRepository
        """
        engine = engine or build_engine()
        if create_tables:
            init_db(engine)
        return cls(build_session_factory(engine))

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._session_factory() as session, session.begin():
            yield session

    def add(self, draft: SubscriptionDraft, now: datetime) -> SubscriptionEntity:
        record = SubscriptionRecord(
            name=draft.name,
            description=draft.description,
            price=draft.price,
            currency=draft.currency,
            category=draft.category,
            billing_period=draft.billing_period,
            website_url=draft.website_url,
            logo_url=draft.logo_url,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            with self._transaction() as session:
                session.add(record)
                session.flush()
                entity = _to_entity(record)
        except IntegrityError as e:
            raise SubscriptionConflictError(draft.name) from e
        return entity

    def get(self, subscription_id: int) -> SubscriptionEntity | None:
        with self._transaction() as session:
            record = session.get(SubscriptionRecord, subscription_id)
            return _to_entity(record) if record is not None else None

    def exists_by_name(self, name: str) -> bool:
        with self._transaction() as session:
            stmt = select(SubscriptionRecord.id).where(SubscriptionRecord.name == name).limit(1)
            return session.execute(stmt).first() is not None

    def update(self, entity: SubscriptionEntity) -> SubscriptionEntity:
        try:
            with self._transaction() as session:
                record = session.get(SubscriptionRecord, entity.id)
                if record is None:
                    raise SubscriptionNotFoundError(entity.id)

                record.name = entity.name
                record.description = entity.description
                record.price = entity.price
                record.currency = entity.currency
                record.category = entity.category
                record.billing_period = entity.billing_period
                record.website_url = entity.website_url
                record.logo_url = entity.logo_url
                record.is_active = entity.is_active
                record.updated_at = entity.updated_at
                session.flush()
                updated = _to_entity(record)
        except IntegrityError as e:
            raise SubscriptionConflictError(entity.name) from e
        return updated

    def list_by_status(self, active: bool) -> list[SubscriptionEntity]:
        stmt = (
            select(SubscriptionRecord)
            .where(SubscriptionRecord.is_active.is_(active))
            .order_by(SubscriptionRecord.id)
        )
        return self._fetch(stmt)

    def list_by_category(self, category: str, active: bool) -> list[SubscriptionEntity]:
        stmt = (
            select(SubscriptionRecord)
            .where(SubscriptionRecord.category == category, SubscriptionRecord.is_active.is_(active))
            .order_by(SubscriptionRecord.id)
        )
        return self._fetch(stmt)

    def list_active_categories(self) -> list[str]:
        stmt = (
            select(SubscriptionRecord.category)
            .where(SubscriptionRecord.is_active.is_(True))
            .distinct()
            .order_by(SubscriptionRecord.category)
        )
        with self._transaction() as session:
            return list(session.scalars(stmt))

    def search_active_by_name(self, term: str) -> list[SubscriptionEntity]:
        stmt = (
            select(SubscriptionRecord)
            .where(
                SubscriptionRecord.name.icontains(term, autoescape=True),
                SubscriptionRecord.is_active.is_(True),
            )
            .order_by(SubscriptionRecord.id)
        )
        return self._fetch(stmt)

    def find_page(self, request: PageRequest, active: bool | None = None) -> Page[SubscriptionEntity]:
        criteria = [] if active is None else [SubscriptionRecord.is_active.is_(active)]
        return self._page(criteria, request)

    def search_page(self, term: str, request: PageRequest) -> Page[SubscriptionEntity]:
        criteria = [
            or_(
                SubscriptionRecord.name.icontains(term, autoescape=True),
                SubscriptionRecord.description.icontains(term, autoescape=True),
                SubscriptionRecord.category.icontains(term, autoescape=True),
            )
        ]
        return self._page(criteria, request)

    def count_by_status(self, active: bool) -> int:
        stmt = select(func.count()).select_from(SubscriptionRecord).where(SubscriptionRecord.is_active.is_(active))
        return self._scalar(stmt)

    def count_active_categories(self) -> int:
        stmt = select(func.count(func.distinct(SubscriptionRecord.category))).where(
            SubscriptionRecord.is_active.is_(True)
        )
        return self._scalar(stmt)

    def count_active_by_category(self) -> dict[str, int]:
        stmt = (
            select(SubscriptionRecord.category, func.count())
            .where(SubscriptionRecord.is_active.is_(True))
            .group_by(SubscriptionRecord.category)
            .order_by(SubscriptionRecord.category)
        )
        with self._transaction() as session:
            return {category: int(count) for category, count in session.execute(stmt)}

    def count_all(self) -> int:
        return self._scalar(select(func.count()).select_from(SubscriptionRecord))

    def health_check(self) -> bool:
        """Check if the database is reachable.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._transaction() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database health check failed: %s", e)
            return False

    def _fetch(self, stmt) -> list[SubscriptionEntity]:
        with self._transaction() as session:
            return [_to_entity(record) for record in session.scalars(stmt)]

    def _scalar(self, stmt) -> int:
        with self._transaction() as session:
            return int(session.execute(stmt).scalar_one() or 0)

    def _page(self, criteria: list, request: PageRequest) -> Page[SubscriptionEntity]:
        column = SORTABLE_FIELDS.get(request.sort_by)
        if column is None:
            raise InvalidQueryError(
                f"Cannot sort by '{request.sort_by}'. Allowed fields: {', '.join(SORTABLE_FIELDS)}"
            )
        ordering = column.desc() if request.direction is SortDirection.DESC else column.asc()

        count_stmt = select(func.count()).select_from(SubscriptionRecord).where(*criteria)
        stmt = (
            select(SubscriptionRecord)
            .where(*criteria)
            .order_by(ordering, SubscriptionRecord.id)
            .offset(request.offset)
            .limit(request.size)
        )

        with self._transaction() as session:
            total = int(session.execute(count_stmt).scalar_one())
            items = [_to_entity(record) for record in session.scalars(stmt)]

        return Page(items=items, page=request.page, size=request.size, total_items=total)
