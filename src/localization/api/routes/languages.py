from typing import Any

from fastapi import APIRouter

from localization.api.deps import LanguageServiceDep
from localization.core.base_models import Message
from localization.languages import LanguageCreate, LanguagePublic, LanguageUpdate

router = APIRouter(prefix="/languages", tags=["languages"])


@router.post("/", response_model=LanguagePublic)
def create_language(service: LanguageServiceDep, language_in: LanguageCreate) -> Any:
    """Register a language. The first language becomes the default."""
    return service.create(language_in)


@router.get("/", response_model=list[LanguagePublic])
def read_languages(service: LanguageServiceDep, active: bool | None = None) -> Any:
    return service.find_all(active=active)


@router.get("/default", response_model=LanguagePublic)
def read_default_language(service: LanguageServiceDep) -> Any:
    return service.get_default_language()


@router.get("/code/{code}", response_model=LanguagePublic)
def read_language_by_code(service: LanguageServiceDep, code: str) -> Any:
    return service.find_by_code(code)


@router.get("/{language_id}", response_model=LanguagePublic)
def read_language(service: LanguageServiceDep, language_id: str) -> Any:
    return service.find_by_id(language_id)


@router.put("/{language_id}", response_model=LanguagePublic)
def update_language(
    service: LanguageServiceDep, language_id: str, language_in: LanguageUpdate
) -> Any:
    return service.update(language_id, language_in)


@router.delete("/{language_id}", response_model=Message)
def delete_language(service: LanguageServiceDep, language_id: str) -> Any:
    """Delete a language and its translations.

    The last remaining language cannot be deleted.
    """
    service.remove(language_id)
    return Message(message="Language deleted successfully")


@router.post("/{language_id}/default", response_model=LanguagePublic)
def set_default_language(service: LanguageServiceDep, language_id: str) -> Any:
    return service.set_as_default(language_id)
