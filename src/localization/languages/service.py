from sqlmodel import Session, col, func, select

from localization.core.cache import TTLCache
from localization.core.config import settings
from localization.core.db import SessionFactory, SessionLocal
from localization.core.exceptions import (
    InvariantViolationError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from localization.core.logging import get_logger
from localization.core.uow import atomic, read_only
from localization.languages.models import (
    Language,
    LanguageCreate,
    LanguagePublic,
    LanguageUpdate,
)

logger = get_logger(__name__)

RESOURCE = "Language"
DEFAULT_LANGUAGE_KEY = "default_language"


class LanguageService:
    """Language registry.

    Keeps the "exactly one default language" invariant on every write and
    caches a copy of the default language. Every operation that could change
    which language is the default invalidates that cache entry.
    """

    def __init__(
        self,
        session_factory: SessionFactory = SessionLocal,
        cache: TTLCache | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._cache = cache if cache is not None else TTLCache(
            ttl_seconds=settings.DEFAULT_LANGUAGE_CACHE_TTL_SECONDS,
            name="default_language",
        )

    @property
    def cache(self) -> TTLCache:
        return self._cache

    def create(self, language_in: LanguageCreate) -> Language:
        """Create a language.

        The first language in an empty registry always becomes the default.
        Creating a default language clears the flag on every other row first.

        Raises:
            ResourceExistsError: If the code is already registered
        """
        with atomic(self._session_factory) as uow:
            session = uow.session
            if _get_by_code(session, language_in.code):
                raise ResourceExistsError(RESOURCE, "code", language_in.code)

            make_default = language_in.is_default or _count(session) == 0
            if make_default:
                _clear_defaults(session)

            db_language = Language.model_validate(
                language_in, update={"is_default": make_default}
            )
            session.add(db_language)

        if make_default:
            self._invalidate_default()
        logger.info(
            "language_created", code=db_language.code, is_default=make_default
        )
        return db_language

    def find_all(self, active: bool | None = None) -> list[Language]:
        statement = select(Language)
        if active is not None:
            statement = statement.where(Language.active == active)
        with read_only(self._session_factory) as session:
            return list(session.exec(statement.order_by(col(Language.code))).all())

    def find_by_id(self, language_id: str) -> Language:
        with read_only(self._session_factory) as session:
            language = session.get(Language, language_id)
        if not language:
            raise ResourceNotFoundError(RESOURCE, language_id)
        return language

    def find_by_code(self, code: str) -> Language:
        with read_only(self._session_factory) as session:
            language = _get_by_code(session, code)
        if not language:
            raise ResourceNotFoundError(RESOURCE, code)
        return language

    def resolve_code(self, code: str) -> Language:
        """Find a language by code, ignoring case ("EN" resolves "en")."""
        statement = select(Language).where(code_matches(code))
        with read_only(self._session_factory) as session:
            language = session.exec(statement).first()
        if not language:
            raise ResourceNotFoundError(RESOURCE, code)
        return language

    def update(self, language_id: str, language_in: LanguageUpdate) -> Language:
        """Update a language, keeping exactly one default.

        Promoting a language clears the other defaults. Demoting the default
        hands the flag to another language (active ones first); when it is the
        only language the demotion is ignored.
        """
        with atomic(self._session_factory) as uow:
            session = uow.session
            db_language = session.get(Language, language_id)
            if not db_language:
                raise ResourceNotFoundError(RESOURCE, language_id)

            data = language_in.model_dump(exclude_unset=True)
            new_code = data.get("code")
            if new_code and new_code != db_language.code and _get_by_code(session, new_code):
                raise ResourceExistsError(RESOURCE, "code", new_code)

            requested_default = data.pop("is_default", None)
            was_default = db_language.is_default
            will_be_default = was_default if requested_default is None else requested_default

            if will_be_default and not was_default:
                _clear_defaults(session)
            elif was_default and not will_be_default:
                successor = _pick_successor(session, db_language.id)
                if successor is None:
                    logger.info("language_default_kept", code=db_language.code)
                    will_be_default = True
                else:
                    successor.is_default = True
                    session.add(successor)

            db_language.sqlmodel_update(data)
            db_language.is_default = will_be_default
            session.add(db_language)

        if was_default or will_be_default:
            self._invalidate_default()
        return db_language

    def remove(self, language_id: str) -> None:
        """Delete a language.

        Raises:
            ResourceNotFoundError: If the id does not resolve
            InvariantViolationError: If it is the only language left
        """
        with atomic(self._session_factory) as uow:
            session = uow.session
            db_language = session.get(Language, language_id)
            if not db_language:
                raise ResourceNotFoundError(RESOURCE, language_id)

            if _count(session) <= 1:
                raise InvariantViolationError(
                    "Cannot delete the only language in the system",
                    invariant="at_least_one_language",
                )

            was_default = db_language.is_default
            if was_default:
                successor = _pick_successor(session, db_language.id)
                if successor is None:
                    raise InvariantViolationError(
                        "Cannot delete the default language without a successor",
                        invariant="single_default_language",
                    )
                successor.is_default = True
                session.add(successor)
                logger.info(
                    "language_default_promoted",
                    removed=db_language.code,
                    promoted=successor.code,
                )

            session.delete(db_language)

        if was_default:
            self._invalidate_default()
        logger.info("language_removed", language_id=language_id)

    def set_as_default(self, language_id: str) -> Language:
        with atomic(self._session_factory) as uow:
            session = uow.session
            db_language = session.get(Language, language_id)
            if not db_language:
                raise ResourceNotFoundError(RESOURCE, language_id)

            _clear_defaults(session)
            db_language.is_default = True
            session.add(db_language)

        self._invalidate_default()
        logger.info("language_set_default", code=db_language.code)
        return db_language

    def get_default_language(self) -> LanguagePublic:
        """Return the default language, cached for DEFAULT_LANGUAGE_CACHE_TTL_SECONDS.

        Raises:
            ResourceNotFoundError: If no language is flagged as default
        """
        cached = self._cache.get(DEFAULT_LANGUAGE_KEY)
        if cached is not None:
            return cached

        statement = select(Language).where(col(Language.is_default).is_(True))
        with read_only(self._session_factory) as session:
            language = session.exec(statement).first()
        if not language:
            raise ResourceNotFoundError("Default language")

        default = LanguagePublic.model_validate(language)
        self._cache.set(DEFAULT_LANGUAGE_KEY, default)
        return default

    def _invalidate_default(self) -> None:
        self._cache.invalidate(DEFAULT_LANGUAGE_KEY)


def _get_by_code(session: Session, code: str) -> Language | None:
    return session.exec(select(Language).where(Language.code == code)).first()


def _count(session: Session) -> int:
    return session.exec(select(func.count()).select_from(Language)).one()


def _clear_defaults(session: Session) -> None:
    statement = select(Language).where(col(Language.is_default).is_(True))
    for language in session.exec(statement).all():
        language.is_default = False
        session.add(language)
    session.flush()


def _pick_successor(session: Session, excluded_id: str) -> Language | None:
    """Choose the language that inherits the default flag, active ones first."""
    statement = (
        select(Language)
        .where(Language.id != excluded_id)
        .order_by(col(Language.active).desc(), col(Language.code))
    )
    return session.exec(statement).first()


def code_matches(code: str):
    """Case-insensitive match of Language.code, usable in joined queries."""
    return func.lower(Language.code) == code.strip().lower()
