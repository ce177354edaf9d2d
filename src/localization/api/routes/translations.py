from typing import Annotated, Any

from fastapi import APIRouter, Body, Query

from localization.api.deps import TranslationServiceDep
from localization.core.base_models import Message
from localization.translations import (
    BatchTranslateRequest,
    BatchTranslateResponse,
    KeysLookupRequest,
    MissingTranslation,
    TranslationCreate,
    TranslationFilter,
    TranslationPublic,
    TranslationsPublic,
    TranslationUpdate,
)

router = APIRouter(prefix="/translations", tags=["translations"])


@router.get("/", response_model=TranslationsPublic)
def read_translations(
    service: TranslationServiceDep,
    key: str | None = None,
    lang: str | None = None,
    namespace: str | None = None,
    category_id: str | None = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> Any:
    """List translations; `key` matches as a case-insensitive substring."""
    filter_in = TranslationFilter(
        key=key, lang=lang, namespace=namespace, category_id=category_id
    )
    rows, count = service.find_all(filter_in, skip=skip, limit=limit)
    return TranslationsPublic(data=rows, count=count)


@router.get("/detail/{translation_id}", response_model=TranslationPublic)
def read_translation(service: TranslationServiceDep, translation_id: str) -> Any:
    return service.find_by_id(translation_id)


@router.get("/{lang}/{namespace}", response_model=dict[str, str])
def read_translation_map(
    service: TranslationServiceDep,
    lang: str,
    namespace: str,
    category_id: str | None = None,
) -> Any:
    """Key -> value map for one language and namespace (i18next resource shape)."""
    return service.get_translations(lang, namespace, category_id)


@router.post("/", response_model=TranslationPublic)
async def create_translation(
    service: TranslationServiceDep, translation_in: TranslationCreate
) -> Any:
    return await service.create(translation_in)


@router.put("/", response_model=TranslationPublic)
async def update_translation(
    service: TranslationServiceDep, translation_in: TranslationUpdate
) -> Any:
    return await service.update_translation(translation_in)


@router.delete("/{translation_id}", response_model=Message)
def delete_translation(service: TranslationServiceDep, translation_id: str) -> Any:
    service.remove(translation_id)
    return Message(message="Translation deleted successfully")


@router.post("/missing", response_model=TranslationPublic | None)
async def add_missing_translation(
    service: TranslationServiceDep, missing_in: MissingTranslation
) -> Any:
    """Record a key reported missing by a client. Returns null if it exists."""
    return await service.add_translation(missing_in)


@router.post("/add/{lang}/{namespace}")
async def add_translations(
    service: TranslationServiceDep,
    lang: str,
    namespace: str,
    values: Annotated[dict[str, str | None], Body()],
    category_id: str | None = None,
) -> dict[str, int]:
    inserted = await service.add_many_translations(lang, namespace, values, category_id)
    return {"inserted": inserted}


@router.post("/batch-translate", response_model=BatchTranslateResponse)
async def batch_translate(
    service: TranslationServiceDep, request_in: BatchTranslateRequest
) -> Any:
    translations = await service.batch_translate(
        request_in.texts, request_in.target_lang, request_in.source_lang
    )
    return BatchTranslateResponse(translations=translations)


@router.post("/lookup", response_model=dict[str, str])
def lookup_translations(service: TranslationServiceDep, lookup_in: KeysLookupRequest) -> Any:
    return service.find_translations_by_keys(
        lookup_in.keys, lookup_in.lang, lookup_in.namespace
    )


@router.post("/missing-keys", response_model=list[str])
def find_missing_keys(service: TranslationServiceDep, lookup_in: KeysLookupRequest) -> Any:
    return service.find_missing_translation_keys(
        lookup_in.keys, lookup_in.lang, lookup_in.namespace
    )
