"""Service wiring.

Services are long-lived (they own caches and the provider HTTP client) and
are built once per application. Tests build their own container around an
in-memory database, a fake clock and a mock transport.
"""

from dataclasses import dataclass

import httpx

from localization.categories.service import CategoryService
from localization.configs.service import ConfigService
from localization.core.cache import Clock, TTLCache
from localization.core.config import settings
from localization.core.db import SessionFactory, SessionLocal
from localization.core.http import create_http_client
from localization.core.tasks import BackgroundTaskSpawner, TaskSpawner
from localization.languages.service import LanguageService
from localization.translations.service import TranslationService
from localization.translator.client import MicrosoftTranslatorClient


@dataclass
class Services:
    configs: ConfigService
    languages: LanguageService
    translator: MicrosoftTranslatorClient
    translations: TranslationService
    categories: CategoryService
    spawner: TaskSpawner

    async def aclose(self) -> None:
        """Wait for scheduled fan-out jobs, then close the provider client."""
        if isinstance(self.spawner, BackgroundTaskSpawner):
            await self.spawner.drain()
        await self.translator.aclose()


def build_services(
    session_factory: SessionFactory = SessionLocal,
    spawner: TaskSpawner | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock | None = None,
) -> Services:
    cache_kwargs = {"clock": clock} if clock else {}
    configs = ConfigService(
        session_factory,
        cache=TTLCache(
            ttl_seconds=settings.CONFIG_CACHE_TTL_SECONDS,
            name="config_by_code",
            **cache_kwargs,
        ),
    )
    languages = LanguageService(
        session_factory,
        cache=TTLCache(
            ttl_seconds=settings.DEFAULT_LANGUAGE_CACHE_TTL_SECONDS,
            name="default_language",
            **cache_kwargs,
        ),
    )
    translator = MicrosoftTranslatorClient(
        configs,
        http_client=create_http_client(settings.TRANSLATOR_ENDPOINT, transport=transport),
    )
    spawner = spawner or BackgroundTaskSpawner()
    translations = TranslationService(
        languages, translator, spawner=spawner, session_factory=session_factory
    )
    categories = CategoryService(languages, session_factory=session_factory)
    return Services(
        configs=configs,
        languages=languages,
        translator=translator,
        translations=translations,
        categories=categories,
        spawner=spawner,
    )
