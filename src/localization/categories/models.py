from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

from localization.core.base_models import ShortIdTable
from localization.core.short_uuid import SHORT_ID_LENGTH

if TYPE_CHECKING:
    from localization.translations.models import Translation

SLUG_PATTERN = r"^[a-z0-9-]+$"


class CategoryBase(SQLModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=255)
    slug: str = Field(
        min_length=2,
        max_length=100,
        schema_extra={"pattern": SLUG_PATTERN},
        unique=True,
        index=True,
    )


class Category(CategoryBase, ShortIdTable, table=True):
    parent_id: str | None = Field(
        default=None,
        foreign_key="category.id",
        ondelete="SET NULL",
        index=True,
        max_length=SHORT_ID_LENGTH,
    )

    parent: Optional["Category"] = Relationship(
        back_populates="children",
        sa_relationship_kwargs={"remote_side": "Category.id"},
    )
    children: list["Category"] = Relationship(back_populates="parent")
    translations: list["Translation"] = Relationship(back_populates="category")


class CategoryCreate(CategoryBase):
    parent_id: str | None = None


class CategoryUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=255)
    slug: str | None = Field(
        default=None,
        min_length=2,
        max_length=100,
        schema_extra={"pattern": SLUG_PATTERN},
    )
    parent_id: str | None = None


class CategoryRef(SQLModel):
    id: str
    name: str
    slug: str


class CategoryPublic(CategoryBase):
    id: str
    parent_id: str | None = None
    parent: CategoryRef | None = None
    children: list[CategoryRef] = []


class TranslationProgress(SQLModel):
    category_id: str
    language_code: str | None = None
    total: int
    translated: int
    percentage: int
