from localization.translator.client import (
    LANGUAGE_CODE_MAPPINGS,
    LANGUAGES_PER_REQUEST,
    MAX_BATCH_SIZE,
    MAX_TEXT_LENGTH,
    DetectedLanguage,
    MicrosoftTranslatorClient,
    map_language_code,
    split_text,
)

__all__ = [
    "LANGUAGE_CODE_MAPPINGS",
    "LANGUAGES_PER_REQUEST",
    "MAX_BATCH_SIZE",
    "MAX_TEXT_LENGTH",
    "DetectedLanguage",
    "MicrosoftTranslatorClient",
    "map_language_code",
    "split_text",
]
