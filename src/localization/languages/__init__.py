from localization.languages.models import (
    Language,
    LanguageBase,
    LanguageCreate,
    LanguagePublic,
    LanguageUpdate,
)
from localization.languages.service import LanguageService

__all__ = [
    # Models
    "Language",
    "LanguageBase",
    "LanguageCreate",
    "LanguagePublic",
    "LanguageUpdate",
    # Service
    "LanguageService",
]
