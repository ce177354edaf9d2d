from functools import lru_cache
from typing import Annotated, Any, Literal, Self
import warnings

from pydantic import AnyUrl, BeforeValidator, computed_field, model_validator
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PASSWORD = "changethis"


def parse_cors(v: Any) -> list[str] | str:
    """Accept a JSON list or a comma separated string of origins."""
    if isinstance(v, str) and not v.startswith("["):
        return [origin.strip() for origin in v.split(",") if origin.strip()]
    if isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Localization API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = DEFAULT_DB_PASSWORD
    POSTGRES_DB: str = "app"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Microsoft Translator. The key and region are rows in the third party
    # config table; these two settings only name the codes to read.
    TRANSLATOR_ENDPOINT: str = "https://api.cognitive.microsofttranslator.com"
    TRANSLATOR_API_VERSION: str = "3.0"
    TRANSLATOR_TIMEOUT_SECONDS: float = 5.0
    TRANSLATOR_API_KEY_CODE: str = "MICROSOFT_TRANSLATOR_API_KEY"
    TRANSLATOR_REGION_CODE: str = "MICROSOFT_TRANSLATOR_REGION"

    # Caches
    CONFIG_CACHE_TTL_SECONDS: int = 300
    DEFAULT_LANGUAGE_CACHE_TTL_SECONDS: int = 3600

    # Seed data
    SEED_DEFAULT_LANGUAGE_CODE: str = "en"
    SEED_DEFAULT_LANGUAGE_NAME: str = "English"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.CORS_ORIGINS]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> MultiHostUrl:
        return MultiHostUrl.build(
            scheme="postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    @property
    def sql_echo(self) -> bool:
        """Echo SQL only when debugging locally."""
        return self.DEBUG and self.ENVIRONMENT == "local"

    @model_validator(mode="after")
    def _check_database_password(self) -> Self:
        if self.POSTGRES_PASSWORD != DEFAULT_DB_PASSWORD:
            return self
        if self.ENVIRONMENT == "production":
            raise ValueError(
                "POSTGRES_PASSWORD still has its default value; "
                "set it through the environment before running in production."
            )
        if self.ENVIRONMENT != "local":
            warnings.warn(
                f"POSTGRES_PASSWORD has its default value in {self.ENVIRONMENT}.",
                UserWarning,
                stacklevel=2,
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
