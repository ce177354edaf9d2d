from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from localization.core.base_models import ShortIdTable

if TYPE_CHECKING:
    from localization.translations.models import Translation


class LanguageBase(SQLModel):
    code: str = Field(min_length=2, max_length=10, unique=True, index=True)
    name: str = Field(min_length=2, max_length=100)
    active: bool = Field(default=True, index=True)
    is_default: bool = Field(default=False, index=True)
    flag_icon: str | None = Field(default=None, max_length=255)


class Language(LanguageBase, ShortIdTable, table=True):
    """Language record.

    Exactly one row carries is_default=True whenever the table is non-empty;
    LanguageService enforces this on every write.
    """

    translations: list["Translation"] = Relationship(
        back_populates="language",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class LanguageCreate(LanguageBase):
    pass


class LanguageUpdate(SQLModel):
    code: str | None = Field(default=None, min_length=2, max_length=10)
    name: str | None = Field(default=None, min_length=2, max_length=100)
    active: bool | None = None
    is_default: bool | None = None
    flag_icon: str | None = Field(default=None, max_length=255)


class LanguagePublic(LanguageBase):
    id: str
