"""Translation store and the auto-translation fan-out.

Writes to the default language (and every create) schedule a detached job
that translates the new value into every other active language and inserts
the results. The job goes through a TaskSpawner so the write never waits for
the provider, and its failures are logged at the spawner's boundary.
"""

import asyncio
from collections.abc import Mapping, Sequence
from functools import partial
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from localization.categories.models import Category
from localization.core.db import SessionFactory, SessionLocal, paginate
from localization.core.exceptions import (
    ResourceExistsError,
    ResourceNotFoundError,
    TranslatorUnavailableError,
    ValidationError,
)
from localization.core.logging import get_logger
from localization.core.tasks import BackgroundTaskSpawner, TaskSpawner
from localization.core.uow import atomic, read_only
from localization.languages.models import Language, LanguagePublic
from localization.languages.service import LanguageService, code_matches
from localization.translations.models import (
    DEFAULT_NAMESPACE,
    MissingTranslation,
    TranslatedText,
    Translation,
    TranslationCreate,
    TranslationFilter,
    TranslationUpdate,
)
from localization.translator.client import MicrosoftTranslatorClient

logger = get_logger(__name__)

RESOURCE = "Translation"

# Rows scheduled for fan-out together by add_many_translations.
FAN_OUT_BATCH_SIZE = 5
# Texts handed to the provider client per batch_translate step.
BATCH_TRANSLATE_CHUNK_SIZE = 50

T = TypeVar("T")


def _chunked(items: Sequence[T], size: int) -> list[Sequence[T]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value


class TranslationService:
    def __init__(
        self,
        language_service: LanguageService,
        translator: MicrosoftTranslatorClient,
        spawner: TaskSpawner | None = None,
        session_factory: SessionFactory = SessionLocal,
    ) -> None:
        self._language_service = language_service
        self._translator = translator
        self._spawner = spawner or BackgroundTaskSpawner()
        self._session_factory = session_factory

    def get_translations(
        self,
        lang: str,
        namespace: str = DEFAULT_NAMESPACE,
        category_id: str | None = None,
    ) -> dict[str, str]:
        """Flat key -> value map for one language and namespace.

        Missing values render as "". An unknown language yields an empty map.
        """
        statement = (
            select(Translation.key, Translation.value)
            .join(Language)
            .where(code_matches(lang), Translation.namespace == namespace)
        )
        if category_id:
            statement = statement.where(Translation.category_id == category_id)

        with read_only(self._session_factory) as session:
            rows = session.exec(statement).all()
        return {key: value or "" for key, value in rows}

    def find_all(
        self,
        filter_in: TranslationFilter | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Translation], int]:
        statement = select(Translation)
        if filter_in:
            if filter_in.key:
                statement = statement.where(
                    col(Translation.key).ilike(f"%{filter_in.key}%")
                )
            if filter_in.lang:
                statement = statement.join(Language).where(
                    code_matches(filter_in.lang)
                )
            if filter_in.namespace:
                statement = statement.where(Translation.namespace == filter_in.namespace)
            if filter_in.category_id:
                statement = statement.where(
                    Translation.category_id == filter_in.category_id
                )

        with read_only(self._session_factory) as session:
            return paginate(
                session, statement, skip=skip, limit=limit, order_by=col(Translation.key)
            )

    def find_by_id(self, translation_id: str) -> Translation:
        with read_only(self._session_factory) as session:
            translation = session.get(Translation, translation_id)
        if not translation:
            raise ResourceNotFoundError(RESOURCE, translation_id)
        return translation

    def remove(self, translation_id: str) -> None:
        with atomic(self._session_factory) as uow:
            translation = uow.session.get(Translation, translation_id)
            if not translation:
                raise ResourceNotFoundError(RESOURCE, translation_id)
            uow.session.delete(translation)
        logger.info("translation_removed", translation_id=translation_id)

    async def create(self, translation_in: TranslationCreate) -> Translation:
        """Insert a new translation and schedule fan-out for it.

        Fan-out is scheduled whatever the language of the write, unlike
        update_translation and add_translation which only fan out edits to
        the default language.

        Raises:
            ValidationError: If key, value or lang is blank
            ResourceNotFoundError: If the language (or category) does not exist
            ResourceExistsError: If (lang, namespace, key) already exists
        """
        key = _require(translation_in.key, "key")
        value = _require(translation_in.value, "value")
        language = self._language_service.resolve_code(_require(translation_in.lang, "lang"))

        try:
            with atomic(self._session_factory) as uow:
                session = uow.session
                _check_category(session, translation_in.category_id)
                if _find_row(session, language.id, translation_in.namespace, key):
                    raise ResourceExistsError(RESOURCE, "key", key)

                translation = Translation(
                    namespace=translation_in.namespace,
                    key=key,
                    value=value,
                    language_id=language.id,
                    category_id=translation_in.category_id,
                )
                session.add(translation)
                uow.flush()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same tuple.
            raise ResourceExistsError(RESOURCE, "key", key) from None

        logger.info(
            "translation_created",
            key=key,
            namespace=translation.namespace,
            lang=language.code,
        )
        await self._schedule_fan_out(translation, language)
        return translation

    async def update_translation(self, translation_in: TranslationUpdate) -> Translation:
        """Overwrite the value of (lang, namespace, key), creating it if absent."""
        key = _require(translation_in.key, "key")
        value = _require(translation_in.value, "value")
        language = self._language_service.resolve_code(_require(translation_in.lang, "lang"))

        with atomic(self._session_factory) as uow:
            session = uow.session
            translation = _find_row(session, language.id, translation_in.namespace, key)
            if translation is not None:
                if translation_in.category_id is not None:
                    _check_category(session, translation_in.category_id)
                    translation.category_id = translation_in.category_id
                translation.value = value
                session.add(translation)

        if translation is None:
            return await self.create(TranslationCreate(**translation_in.model_dump()))

        logger.info(
            "translation_updated",
            key=key,
            namespace=translation.namespace,
            lang=language.code,
        )
        if self._is_default_language(language):
            await self._schedule_fan_out(translation, language)
        return translation

    async def add_translation(self, missing_in: MissingTranslation) -> Translation | None:
        """Insert a placeholder for a key a client reported as missing.

        The value defaults to the key itself. Returns None when the row
        already exists, so reporting the same key twice is harmless.
        """
        language = self._language_service.resolve_code(missing_in.lang)

        try:
            with atomic(self._session_factory) as uow:
                session = uow.session
                if _find_row(session, language.id, missing_in.namespace, missing_in.key):
                    return None
                _check_category(session, missing_in.category_id)
                translation = Translation(
                    namespace=missing_in.namespace,
                    key=missing_in.key,
                    value=missing_in.default_value or missing_in.key,
                    language_id=language.id,
                    category_id=missing_in.category_id,
                )
                session.add(translation)
                uow.flush()
        except IntegrityError:
            return None

        logger.info(
            "translation_placeholder_added",
            key=translation.key,
            namespace=translation.namespace,
            lang=language.code,
        )
        if self._is_default_language(language):
            await self._schedule_fan_out(translation, language)
        return translation

    async def add_many_translations(
        self,
        lang: str,
        namespace: str,
        values: Mapping[str, str | None],
        category_id: str | None = None,
    ) -> int:
        """Insert the keys of values that do not exist yet; return how many.

        Existing keys are skipped, never overwritten. A falsy value defaults
        to the key. For the default language, fan-out is scheduled in groups
        of FAN_OUT_BATCH_SIZE, one group after the other.
        """
        language = self._language_service.resolve_code(lang)
        wanted = {key: value for key, value in values.items() if key and key.strip()}
        if not wanted:
            return 0

        try:
            with atomic(self._session_factory) as uow:
                session = uow.session
                _check_category(session, category_id)
                existing = set(
                    session.exec(
                        select(Translation.key).where(
                            Translation.language_id == language.id,
                            Translation.namespace == namespace,
                            col(Translation.key).in_(list(wanted)),
                        )
                    ).all()
                )
                created = [
                    Translation(
                        namespace=namespace,
                        key=key,
                        value=value or key,
                        language_id=language.id,
                        category_id=category_id,
                    )
                    for key, value in wanted.items()
                    if key not in existing
                ]
                session.add_all(created)
                uow.flush()
        except IntegrityError:
            # A concurrent writer inserted one of the keys first.
            raise ResourceExistsError(RESOURCE, "key") from None

        logger.info(
            "translations_added",
            lang=language.code,
            namespace=namespace,
            inserted=len(created),
            skipped=len(existing),
        )
        if created and self._is_default_language(language):
            for batch in _chunked(created, FAN_OUT_BATCH_SIZE):
                await asyncio.gather(
                    *(self._schedule_fan_out(row, language) for row in batch)
                )
        return len(created)

    async def batch_translate(
        self,
        texts: Sequence[str],
        target_lang: str,
        source_lang: str | None = None,
    ) -> list[TranslatedText]:
        """Translate arbitrary texts without storing anything.

        Raises:
            TranslatorUnavailableError: If the provider is not configured
            ResourceNotFoundError: If the target or source language is unknown
        """
        if not self._translator.ensure_configured():
            raise TranslatorUnavailableError()
        if not texts:
            return []

        target = self._language_service.resolve_code(target_lang)
        source: Language | LanguagePublic = (
            self._language_service.resolve_code(source_lang)
            if source_lang
            else self._language_service.get_default_language()
        )

        translated: list[TranslatedText] = []
        for chunk in _chunked(list(texts), BATCH_TRANSLATE_CHUNK_SIZE):
            results = await self._translator.translate_batch(chunk, target.code, source.code)
            translated.extend(
                TranslatedText(key=text, value=result or "")
                for text, result in zip(chunk, results, strict=True)
            )
        return translated

    def find_translations_by_keys(
        self, keys: Sequence[str], lang: str, namespace: str = DEFAULT_NAMESPACE
    ) -> dict[str, str]:
        if not keys:
            return {}
        statement = (
            select(Translation.key, Translation.value)
            .join(Language)
            .where(
                code_matches(lang),
                Translation.namespace == namespace,
                col(Translation.key).in_(list(keys)),
            )
        )
        with read_only(self._session_factory) as session:
            rows = session.exec(statement).all()
        return {key: value or "" for key, value in rows}

    def find_missing_translation_keys(
        self, keys: Sequence[str], lang: str, namespace: str = DEFAULT_NAMESPACE
    ) -> list[str]:
        found = self.find_translations_by_keys(keys, lang, namespace)
        return [key for key in keys if key not in found]

    def _is_default_language(self, language: Language) -> bool:
        return self._language_service.get_default_language().id == language.id

    async def _schedule_fan_out(
        self, translation: Translation, source: Language
    ) -> None:
        if not translation.value:
            return
        job = partial(
            self._auto_translate,
            namespace=translation.namespace,
            key=translation.key,
            value=translation.value,
            category_id=translation.category_id,
            source_language_id=source.id,
            source_code=source.code,
        )
        await self._spawner.submit(
            job, name=f"auto_translate:{translation.namespace}:{translation.key}"
        )

    async def _auto_translate(
        self,
        *,
        namespace: str,
        key: str,
        value: str,
        category_id: str | None,
        source_language_id: str,
        source_code: str,
    ) -> int:
        """Translate one value into every other active language and store it.

        Only targets that produced a non-empty result and do not already hold
        (namespace, key) get a row. Returns the number of rows inserted.
        """
        if not self._translator.ensure_configured():
            logger.info("auto_translation_skipped", key=key, reason="not_configured")
            return 0

        targets = [
            language
            for language in self._language_service.find_all(active=True)
            if language.id != source_language_id
        ]
        if not targets:
            return 0

        results = await self._translator.translate_to_many_targets(
            value, [language.code for language in targets], source_code
        )

        with atomic(self._session_factory) as uow:
            session = uow.session
            existing = set(
                session.exec(
                    select(Translation.language_id).where(
                        Translation.namespace == namespace,
                        Translation.key == key,
                        col(Translation.language_id).in_([t.id for t in targets]),
                    )
                ).all()
            )
            rows = [
                Translation(
                    namespace=namespace,
                    key=key,
                    value=results[language.code],
                    language_id=language.id,
                    category_id=category_id,
                )
                for language in targets
                if results.get(language.code) and language.id not in existing
            ]
            session.add_all(rows)

        logger.info(
            "auto_translation_completed",
            key=key,
            namespace=namespace,
            source=source_code,
            targets=len(targets),
            inserted=len(rows),
        )
        return len(rows)


def _find_row(
    session: Session, language_id: str, namespace: str, key: str
) -> Translation | None:
    statement = select(Translation).where(
        Translation.language_id == language_id,
        Translation.namespace == namespace,
        Translation.key == key,
    )
    return session.exec(statement).first()


def _check_category(session: Session, category_id: str | None) -> None:
    if category_id and not session.get(Category, category_id):
        raise ResourceNotFoundError("Category", category_id)
