from collections.abc import Iterable
from datetime import UTC, datetime
import uuid

from sqlmodel import col, select

from localization.configs.models import (
    ThirdPartyConfig,
    ThirdPartyConfigCreate,
    ThirdPartyConfigFilter,
    ThirdPartyConfigPublic,
    ThirdPartyConfigUpdate,
)
from localization.core.cache import TTLCache
from localization.core.config import settings
from localization.core.db import SessionFactory, SessionLocal
from localization.core.exceptions import ResourceNotFoundError
from localization.core.logging import get_logger
from localization.core.uow import atomic, read_only

logger = get_logger(__name__)

RESOURCE = "Configuration"


class ConfigService:
    """Persisted provider configuration with a per-code read cache.

    The cache maps code to a detached copy of the entry. Any mutation
    invalidates the codes it touches; absent codes are never cached.
    """

    def __init__(
        self,
        session_factory: SessionFactory = SessionLocal,
        cache: TTLCache | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._cache = cache if cache is not None else TTLCache(
            ttl_seconds=settings.CONFIG_CACHE_TTL_SECONDS, name="config_by_code"
        )

    @property
    def cache(self) -> TTLCache:
        return self._cache

    def create(self, config_in: ThirdPartyConfigCreate) -> ThirdPartyConfig:
        with atomic(self._session_factory) as uow:
            db_config = ThirdPartyConfig.model_validate(config_in)
            uow.session.add(db_config)

        self._cache.invalidate(db_config.code)
        logger.info("config_created", code=db_config.code, group=db_config.group)
        return db_config

    def find_all(
        self, filter_in: ThirdPartyConfigFilter | None = None
    ) -> list[ThirdPartyConfig]:
        statement = select(ThirdPartyConfig)
        if filter_in:
            if filter_in.code:
                statement = statement.where(
                    col(ThirdPartyConfig.code).contains(filter_in.code)
                )
            if filter_in.type:
                statement = statement.where(ThirdPartyConfig.type == filter_in.type)
            if filter_in.group:
                statement = statement.where(ThirdPartyConfig.group == filter_in.group)

        with read_only(self._session_factory) as session:
            return list(
                session.exec(statement.order_by(col(ThirdPartyConfig.code))).all()
            )

    def find_by_id(self, config_id: uuid.UUID) -> ThirdPartyConfig:
        with read_only(self._session_factory) as session:
            config = session.get(ThirdPartyConfig, config_id)
        if not config:
            raise ResourceNotFoundError(RESOURCE, str(config_id))
        return config

    def get(self, code: str) -> ThirdPartyConfigPublic:
        """Get a configuration entry by code, served from cache when fresh.

        Raises:
            ResourceNotFoundError: If no entry has this code
        """
        cached = self._cache.get(code)
        if cached is not None:
            return cached

        statement = select(ThirdPartyConfig).where(ThirdPartyConfig.code == code)
        with read_only(self._session_factory) as session:
            config = session.exec(statement).first()
        if not config:
            raise ResourceNotFoundError(RESOURCE, code)

        entry = ThirdPartyConfigPublic.model_validate(config)
        self._cache.set(code, entry)
        return entry

    def get_many(self, codes: Iterable[str]) -> dict[str, ThirdPartyConfigPublic]:
        """Resolve several codes at once.

        Fresh cache entries are used as is; the remaining codes are fetched in
        a single query. Codes that do not exist are simply left out.
        """
        result: dict[str, ThirdPartyConfigPublic] = {}
        missing: set[str] = set()
        for code in set(codes):
            cached = self._cache.get(code)
            if cached is not None:
                result[code] = cached
            else:
                missing.add(code)

        if not missing:
            return result

        statement = select(ThirdPartyConfig).where(
            col(ThirdPartyConfig.code).in_(missing)
        )
        with read_only(self._session_factory) as session:
            rows = session.exec(statement).all()

        for row in rows:
            entry = ThirdPartyConfigPublic.model_validate(row)
            result[row.code] = entry
            self._cache.set(row.code, entry)
        return result

    def find_by_group(self, group: str) -> list[ThirdPartyConfig]:
        return self.find_all(ThirdPartyConfigFilter(group=group))

    def find_by_type(self, config_type: str) -> list[ThirdPartyConfig]:
        return self.find_all(ThirdPartyConfigFilter(type=config_type))

    def update(
        self, config_id: uuid.UUID, config_in: ThirdPartyConfigUpdate
    ) -> ThirdPartyConfig:
        with atomic(self._session_factory) as uow:
            db_config = uow.session.get(ThirdPartyConfig, config_id)
            if not db_config:
                raise ResourceNotFoundError(RESOURCE, str(config_id))

            old_code = db_config.code
            db_config.sqlmodel_update(config_in.model_dump(exclude_unset=True))
            db_config.updated_at = datetime.now(UTC)
            uow.session.add(db_config)

        self._cache.invalidate(old_code)
        if db_config.code != old_code:
            self._cache.invalidate(db_config.code)
        logger.info("config_updated", code=db_config.code, previous_code=old_code)
        return db_config

    def remove(self, config_id: uuid.UUID) -> None:
        with atomic(self._session_factory) as uow:
            db_config = uow.session.get(ThirdPartyConfig, config_id)
            if not db_config:
                raise ResourceNotFoundError(RESOURCE, str(config_id))
            code = db_config.code
            uow.session.delete(db_config)

        self._cache.invalidate(code)
        logger.info("config_removed", code=code)
