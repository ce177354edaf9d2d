from typing import TYPE_CHECKING, Optional

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from localization.core.base_models import PaginatedResponse, ShortIdTable
from localization.core.short_uuid import SHORT_ID_LENGTH

if TYPE_CHECKING:
    from localization.categories.models import Category
    from localization.languages.models import Language

DEFAULT_NAMESPACE = "translation"


class TranslationBase(SQLModel):
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, max_length=100)
    key: str = Field(min_length=1, max_length=255)
    value: str | None = None


class Translation(TranslationBase, ShortIdTable, table=True):
    """One value of a key, in one namespace, for one language.

    A row with an empty value is a known-missing placeholder.
    """

    __table_args__ = (
        UniqueConstraint(
            "language_id", "namespace", "key", name="uq_translation_language_namespace_key"
        ),
        Index("idx_translation_language_namespace", "language_id", "namespace"),
    )

    language_id: str = Field(
        foreign_key="language.id",
        ondelete="CASCADE",
        max_length=SHORT_ID_LENGTH,
    )
    category_id: str | None = Field(
        default=None,
        foreign_key="category.id",
        ondelete="SET NULL",
        index=True,
        max_length=SHORT_ID_LENGTH,
    )

    language: "Language" = Relationship(back_populates="translations")
    category: Optional["Category"] = Relationship(back_populates="translations")


class TranslationCreate(SQLModel):
    key: str = Field(max_length=255)
    value: str | None = None
    lang: str = Field(max_length=10)
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, max_length=100)
    category_id: str | None = None


class TranslationUpdate(SQLModel):
    """Update-or-create payload, matched on (lang, namespace, key)."""

    key: str = Field(max_length=255)
    value: str
    lang: str = Field(max_length=10)
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, max_length=100)
    category_id: str | None = None


class MissingTranslation(SQLModel):
    key: str = Field(min_length=1, max_length=255)
    lang: str = Field(min_length=1, max_length=10)
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, max_length=100)
    default_value: str | None = None
    category_id: str | None = None


class TranslationFilter(SQLModel):
    key: str | None = None
    lang: str | None = None
    namespace: str | None = None
    category_id: str | None = None


class TranslationPublic(TranslationBase):
    id: str
    language_id: str
    category_id: str | None = None


TranslationsPublic = PaginatedResponse[TranslationPublic]


class BatchTranslateRequest(SQLModel):
    texts: list[str] = Field(min_length=1)
    target_lang: str = Field(min_length=1, max_length=10)
    source_lang: str | None = Field(default=None, max_length=10)


class TranslatedText(SQLModel):
    key: str
    value: str


class BatchTranslateResponse(SQLModel):
    translations: list[TranslatedText]


class KeysLookupRequest(SQLModel):
    keys: list[str]
    lang: str = Field(min_length=1, max_length=10)
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, max_length=100)
