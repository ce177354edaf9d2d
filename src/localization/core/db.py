from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.orm import InstrumentedAttribute, sessionmaker
from sqlmodel import Session, SQLModel, create_engine, func, select
from sqlmodel.sql.expression import SelectOfScalar

from localization.core.config import settings

engine = create_engine(
    str(settings.SQLALCHEMY_DATABASE_URI),
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    echo=settings.sql_echo,
)

# Rows outlive the unit of work that loaded them (services return them and
# caches copy them), so commit must not expire their attributes.
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)

SessionFactory = Callable[[], Session]

M = TypeVar("M", bound=SQLModel)


def paginate(
    session: Session,
    statement: SelectOfScalar[M],
    skip: int = 0,
    limit: int = 100,
    order_by: InstrumentedAttribute[Any] | None = None,
) -> tuple[list[M], int]:
    """Run one page of a list query and count every matching row.

    The count is taken over the filtered statement before ordering and
    slicing, so it is the size of the whole result, not of the page.
    """
    total = session.exec(select(func.count()).select_from(statement.subquery())).one()

    if order_by is not None:
        statement = statement.order_by(order_by)
    page = session.exec(statement.offset(skip).limit(limit)).all()
    return list(page), total
