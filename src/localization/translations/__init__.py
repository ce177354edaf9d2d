from localization.translations.models import (
    DEFAULT_NAMESPACE,
    BatchTranslateRequest,
    BatchTranslateResponse,
    KeysLookupRequest,
    MissingTranslation,
    TranslatedText,
    Translation,
    TranslationBase,
    TranslationCreate,
    TranslationFilter,
    TranslationPublic,
    TranslationsPublic,
    TranslationUpdate,
)
from localization.translations.service import TranslationService

__all__ = [
    "DEFAULT_NAMESPACE",
    # Models
    "BatchTranslateRequest",
    "BatchTranslateResponse",
    "KeysLookupRequest",
    "MissingTranslation",
    "TranslatedText",
    "Translation",
    "TranslationBase",
    "TranslationCreate",
    "TranslationFilter",
    "TranslationPublic",
    "TranslationsPublic",
    "TranslationUpdate",
    # Service
    "TranslationService",
]
