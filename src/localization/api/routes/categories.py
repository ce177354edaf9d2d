from typing import Any

from fastapi import APIRouter

from localization.api.deps import CategoryServiceDep
from localization.categories import (
    CategoryCreate,
    CategoryPublic,
    CategoryUpdate,
    TranslationProgress,
)
from localization.core.base_models import Message

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("/", response_model=CategoryPublic)
def create_category(service: CategoryServiceDep, category_in: CategoryCreate) -> Any:
    return service.create(category_in)


@router.get("/", response_model=list[CategoryPublic])
def read_categories(service: CategoryServiceDep) -> Any:
    return service.find_all()


@router.get("/id/{category_id}", response_model=CategoryPublic)
def read_category(service: CategoryServiceDep, category_id: str) -> Any:
    return service.find_by_id(category_id)


@router.get("/slug/{slug}", response_model=CategoryPublic)
def read_category_by_slug(service: CategoryServiceDep, slug: str) -> Any:
    return service.find_by_slug(slug)


@router.put("/{category_id}", response_model=CategoryPublic)
def update_category(
    service: CategoryServiceDep, category_id: str, category_in: CategoryUpdate
) -> Any:
    return service.update(category_id, category_in)


@router.delete("/{category_id}", response_model=Message)
def delete_category(service: CategoryServiceDep, category_id: str) -> Any:
    service.remove(category_id)
    return Message(message="Category deleted successfully")


@router.get("/{category_id}/progress", response_model=TranslationProgress)
def read_translation_progress(
    service: CategoryServiceDep, category_id: str, lang: str | None = None
) -> Any:
    """Translation coverage of a category.

    With `lang`, compares that language with the default language; without
    it, compares all rows with every key in every active language.
    """
    return service.get_translation_progress(category_id, lang)
