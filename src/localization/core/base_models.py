"""Base models and mixins for SQLModel schemas.

Usage:
    - Database models (table=True) inherit from a composed base class
    - Response schemas use TimestampResponseMixin for timestamp fields
    - List responses use PaginatedResponse[T]

Example:
    class Language(LanguageBase, ShortIdTable, table=True):
        ...

    class ThirdPartyConfig(ThirdPartyConfigBase, TimestampedTable, table=True):
        ...
"""

import uuid
from datetime import UTC, datetime
from typing import Generic, TypeVar

from sqlmodel import Field, SQLModel

from localization.core.short_uuid import SHORT_ID_LENGTH, generate_short_id

T = TypeVar("T")


class ShortIdPrimaryKeyMixin(SQLModel):
    """22-character short id primary key (languages, categories, translations)."""

    id: str = Field(
        default_factory=generate_short_id,
        primary_key=True,
        max_length=SHORT_ID_LENGTH,
    )


class UUIDPrimaryKeyMixin(SQLModel):
    """Standard UUID primary key."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


class TimestampMixin(SQLModel):
    """Created/updated timestamps for audit trail."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ShortIdTable(ShortIdPrimaryKeyMixin):
    """Base for tables keyed by short id."""

    pass


class TimestampedTable(UUIDPrimaryKeyMixin, TimestampMixin):
    """Base for tables with UUID key and timestamps.

    Use for: ThirdPartyConfig
    """

    pass


class TimestampResponseMixin(SQLModel):
    """For Public/Response schemas that include timestamps."""

    created_at: datetime
    updated_at: datetime


class PaginatedResponse(SQLModel, Generic[T]):
    """Standard paginated response wrapper.

    Example:
        @router.get("/", response_model=PaginatedResponse[TranslationPublic])
        def list_translations(...):
            return PaginatedResponse(data=rows, count=total)
    """

    data: list[T]
    count: int


class Message(SQLModel):
    message: str
