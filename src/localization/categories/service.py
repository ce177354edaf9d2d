from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, func, select

from localization.categories.models import (
    Category,
    CategoryCreate,
    CategoryPublic,
    CategoryUpdate,
    TranslationProgress,
)
from localization.core.db import SessionFactory, SessionLocal
from localization.core.exceptions import (
    ResourceExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from localization.core.logging import get_logger
from localization.core.uow import atomic, read_only
from localization.languages.models import Language
from localization.languages.service import LanguageService, code_matches
from localization.translations.models import Translation

logger = get_logger(__name__)

RESOURCE = "Category"


def _with_tree():
    return (
        selectinload(Category.parent),  # type: ignore[arg-type]
        selectinload(Category.children),  # type: ignore[arg-type]
    )


def _percentage(translated: int, total: int) -> int:
    """translated/total as a whole percentage, rounding halves up."""
    if total <= 0:
        return 0
    return (translated * 200 + total) // (2 * total)


class CategoryService:
    """Hierarchical categories and per-category translation progress.

    Reads return CategoryPublic built while the session is open, so the
    parent and children references are always populated.
    """

    def __init__(
        self,
        language_service: LanguageService,
        session_factory: SessionFactory = SessionLocal,
    ) -> None:
        self._language_service = language_service
        self._session_factory = session_factory

    def create(self, category_in: CategoryCreate) -> CategoryPublic:
        with atomic(self._session_factory) as uow:
            session = uow.session
            if _get_by_slug(session, category_in.slug):
                raise ResourceExistsError(RESOURCE, "slug", category_in.slug)
            if category_in.parent_id and not session.get(Category, category_in.parent_id):
                raise ResourceNotFoundError("Parent category", category_in.parent_id)

            category = Category.model_validate(category_in)
            session.add(category)
            uow.flush()
            session.refresh(category)
            public = CategoryPublic.model_validate(category)

        logger.info("category_created", slug=public.slug, parent_id=public.parent_id)
        return public

    def find_all(self) -> list[CategoryPublic]:
        statement = select(Category).options(*_with_tree()).order_by(col(Category.name))
        with read_only(self._session_factory) as session:
            return [
                CategoryPublic.model_validate(category)
                for category in session.exec(statement).all()
            ]

    def find_by_id(self, category_id: str) -> CategoryPublic:
        statement = (
            select(Category).where(Category.id == category_id).options(*_with_tree())
        )
        with read_only(self._session_factory) as session:
            category = session.exec(statement).first()
            if not category:
                raise ResourceNotFoundError(RESOURCE, category_id)
            return CategoryPublic.model_validate(category)

    def find_by_slug(self, slug: str) -> CategoryPublic:
        statement = select(Category).where(Category.slug == slug).options(*_with_tree())
        with read_only(self._session_factory) as session:
            category = session.exec(statement).first()
            if not category:
                raise ResourceNotFoundError(RESOURCE, slug)
            return CategoryPublic.model_validate(category)

    def update(self, category_id: str, category_in: CategoryUpdate) -> CategoryPublic:
        """Update a category.

        Raises:
            ResourceNotFoundError: If the category or the new parent is unknown
            ResourceExistsError: If the new slug is taken
            ValidationError: If the new parent would create a cycle
        """
        with atomic(self._session_factory) as uow:
            session = uow.session
            category = session.get(Category, category_id)
            if not category:
                raise ResourceNotFoundError(RESOURCE, category_id)

            data = category_in.model_dump(exclude_unset=True)
            new_slug = data.get("slug")
            if new_slug and new_slug != category.slug and _get_by_slug(session, new_slug):
                raise ResourceExistsError(RESOURCE, "slug", new_slug)

            parent_id = data.get("parent_id")
            if parent_id:
                if not session.get(Category, parent_id):
                    raise ResourceNotFoundError("Parent category", parent_id)
                if _is_ancestor_or_self(session, category_id, parent_id):
                    raise ValidationError(
                        "A category cannot be moved under itself or its descendants",
                        field="parent_id",
                    )

            category.sqlmodel_update(data)
            session.add(category)
            uow.flush()
            session.refresh(category)
            public = CategoryPublic.model_validate(category)

        logger.info("category_updated", category_id=category_id)
        return public

    def remove(self, category_id: str) -> None:
        with atomic(self._session_factory) as uow:
            category = uow.session.get(Category, category_id)
            if not category:
                raise ResourceNotFoundError(RESOURCE, category_id)
            uow.session.delete(category)
        logger.info("category_removed", category_id=category_id)

    def get_translation_progress(
        self, category_id: str, language_code: str | None = None
    ) -> TranslationProgress:
        """How much of a category is translated.

        With a language code, compares that language's rows with the default
        language's rows. Without one, compares every row in the category with
        (distinct default-language keys) x (active languages).
        """
        with read_only(self._session_factory) as session:
            if not session.get(Category, category_id):
                raise ResourceNotFoundError(RESOURCE, category_id)

        default = self._language_service.get_default_language()
        in_category = Translation.category_id == category_id

        if language_code:
            # An unknown code matches no rows and counts as nothing translated.
            language_ids = select(Language.id).where(code_matches(language_code))
            with read_only(self._session_factory) as session:
                total = _count(session, in_category, Translation.language_id == default.id)
                translated = _count(
                    session, in_category, col(Translation.language_id).in_(language_ids)
                )
        else:
            active = len(self._language_service.find_all(active=True))
            with read_only(self._session_factory) as session:
                keys = session.exec(
                    select(func.count(func.distinct(Translation.key))).where(
                        in_category, Translation.language_id == default.id
                    )
                ).one()
                translated = _count(session, in_category)
            total = keys * active

        return TranslationProgress(
            category_id=category_id,
            language_code=language_code,
            total=total,
            translated=translated,
            percentage=_percentage(translated, total),
        )


def _get_by_slug(session: Session, slug: str) -> Category | None:
    return session.exec(select(Category).where(Category.slug == slug)).first()


def _count(session: Session, *conditions) -> int:
    statement = select(func.count()).select_from(Translation).where(*conditions)
    return session.exec(statement).one()


def _is_ancestor_or_self(session: Session, category_id: str, candidate_id: str) -> bool:
    """True if category_id is candidate_id or one of its ancestors."""
    seen: set[str] = set()
    current: str | None = candidate_id
    while current and current not in seen:
        if current == category_id:
            return True
        seen.add(current)
        current = session.exec(
            select(Category.parent_id).where(Category.id == current)
        ).first()
    return False
