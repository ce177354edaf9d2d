"""Shared fixtures: in-memory database, fake clock, fake translator API."""

import json

import httpx
import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from localization.categories import CategoryService
from localization.configs import ConfigService, ThirdPartyConfigCreate
from localization.core.cache import TTLCache
from localization.core.config import settings
from localization.core.tasks import InlineTaskSpawner
from localization.languages import Language, LanguageCreate, LanguageService
import localization.models  # noqa: F401 - register every table
from localization.translations import TranslationService
from localization.translator import MicrosoftTranslatorClient

TRANSLATOR_BASE_URL = "https://translator.test"


# =============================================================================
# Fakes
# =============================================================================


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTranslatorApi:
    """httpx handler imitating Microsoft Translator v3.

    Translates "text" into "text[to]" for every requested target. Requests
    are recorded; failures can be forced per target, per text or globally.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail_all = False
        self.fail_targets: set[str] = set()
        self.fail_texts: set[str] = set()
        self.detect_supported = True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_all:
            return httpx.Response(503, json={"error": {"code": 503000}})

        body = json.loads(request.content)
        if request.url.path == "/detect":
            return httpx.Response(
                200,
                json=[
                    {
                        "language": "fr",
                        "score": 0.97,
                        "isTranslationSupported": self.detect_supported,
                    }
                ],
            )

        targets = request.url.params.get_list("to")
        if self.fail_targets.intersection(targets):
            return httpx.Response(500, json={"error": "target failed"})
        if any(item["text"] in self.fail_texts for item in body):
            return httpx.Response(500, json={"error": "text failed"})

        return httpx.Response(
            200,
            json=[
                {
                    "translations": [
                        {"text": f"{item['text']}[{target}]", "to": target}
                        for target in targets
                    ]
                }
                for item in body
            ],
        )

    @property
    def translate_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/translate"]

    def requested_targets(self) -> list[str]:
        return [
            target
            for request in self.translate_requests
            for target in request.url.params.get_list("to")
        ]

    def requested_texts(self) -> list[str]:
        return [
            item["text"]
            for request in self.translate_requests
            for item in json.loads(request.content)
        ]


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def translator_api():
    return FakeTranslatorApi()


@pytest.fixture
def config_service(session_factory, clock):
    return ConfigService(
        session_factory,
        cache=TTLCache(ttl_seconds=300, clock=clock, name="config_by_code"),
    )


@pytest.fixture
def configured(config_service):
    """Store translator credentials in the config store."""
    for code, value in (
        (settings.TRANSLATOR_API_KEY_CODE, "secret-key"),
        (settings.TRANSLATOR_REGION_CODE, "westeurope"),
    ):
        config_service.create(
            ThirdPartyConfigCreate(
                code=code, name=code, type="string", value=value, group="translator"
            )
        )


@pytest.fixture
async def http_client(translator_api):
    client = httpx.AsyncClient(
        base_url=TRANSLATOR_BASE_URL, transport=httpx.MockTransport(translator_api)
    )
    yield client
    await client.aclose()


@pytest.fixture
def translator(config_service, http_client):
    return MicrosoftTranslatorClient(config_service, http_client=http_client)


@pytest.fixture
def language_service(session_factory, clock):
    return LanguageService(
        session_factory,
        cache=TTLCache(ttl_seconds=3600, clock=clock, name="default_language"),
    )


@pytest.fixture
def spawner():
    return InlineTaskSpawner()


@pytest.fixture
def translation_service(language_service, translator, spawner, session_factory):
    return TranslationService(
        language_service, translator, spawner=spawner, session_factory=session_factory
    )


@pytest.fixture
def category_service(language_service, session_factory):
    return CategoryService(language_service, session_factory=session_factory)


def add_language(
    service: LanguageService,
    code: str,
    *,
    is_default: bool = False,
    active: bool = True,
) -> Language:
    return service.create(
        LanguageCreate(
            code=code, name=f"Language {code}", is_default=is_default, active=active
        )
    )


@pytest.fixture
def languages(language_service):
    """en (default), fr, de, es: all active."""
    return {
        "en": add_language(language_service, "en", is_default=True),
        "fr": add_language(language_service, "fr"),
        "de": add_language(language_service, "de"),
        "es": add_language(language_service, "es"),
    }


class RecordingTaskSpawner:
    """Records submitted jobs without running them."""

    def __init__(self):
        self.jobs: list[tuple[str, object]] = []

    async def submit(self, job, *, name: str) -> None:
        self.jobs.append((name, job))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.jobs]

    async def run_all(self) -> None:
        jobs, self.jobs = self.jobs, []
        for _, job in jobs:
            await job()
