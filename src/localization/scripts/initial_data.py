"""Seed the default language when the registry is empty.

Usage:
    python -m localization.scripts.initial_data
"""

import logging

from localization.core.config import settings
from localization.languages import LanguageCreate, LanguageService
import localization.models  # noqa: F401 - configure every mapper before querying

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init(service: LanguageService | None = None) -> None:
    service = service or LanguageService()
    languages = service.find_all()
    if languages:
        logger.info(f"Language registry already holds {len(languages)} language(s)")
        return

    language = service.create(
        LanguageCreate(
            code=settings.SEED_DEFAULT_LANGUAGE_CODE,
            name=settings.SEED_DEFAULT_LANGUAGE_NAME,
            is_default=True,
        )
    )
    logger.info(f"Created default language: {language.code}")


def main() -> None:
    logger.info("Creating initial data")
    init()
    logger.info("Initial data created")


if __name__ == "__main__":
    main()
