from localization.categories.models import (
    Category,
    CategoryBase,
    CategoryCreate,
    CategoryPublic,
    CategoryRef,
    CategoryUpdate,
    TranslationProgress,
)
from localization.categories.service import CategoryService

__all__ = [
    # Models
    "Category",
    "CategoryBase",
    "CategoryCreate",
    "CategoryPublic",
    "CategoryRef",
    "CategoryUpdate",
    "TranslationProgress",
    # Service
    "CategoryService",
]
