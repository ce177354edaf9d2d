import pytest
from sqlmodel import select

from localization.core.cache import TTLCache
from localization.core.exceptions import (
    InvariantViolationError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from localization.languages import (
    Language,
    LanguageCreate,
    LanguageService,
    LanguageUpdate,
)
import localization.languages.service as language_service_module
from tests.conftest import add_language


def defaults(service) -> list[str]:
    return [language.code for language in service.find_all() if language.is_default]


# =============================================================================
# CRUD
# =============================================================================


class TestLanguageCrud:
    def test_create_and_find(self, language_service):
        created = add_language(language_service, "en")

        assert len(created.id) == 22
        assert language_service.find_by_id(created.id).code == "en"
        assert language_service.find_by_code("en").id == created.id

    def test_duplicate_code(self, language_service):
        add_language(language_service, "en")

        with pytest.raises(ResourceExistsError):
            add_language(language_service, "en")

    def test_find_all_active_filter(self, language_service):
        add_language(language_service, "en")
        add_language(language_service, "fr", active=False)

        assert [l.code for l in language_service.find_all(active=True)] == ["en"]
        assert [l.code for l in language_service.find_all(active=False)] == ["fr"]
        assert len(language_service.find_all()) == 2

    def test_not_found(self, language_service):
        with pytest.raises(ResourceNotFoundError):
            language_service.find_by_id("missing")
        with pytest.raises(ResourceNotFoundError):
            language_service.find_by_code("xx")

    def test_find_by_code_is_exact_but_resolve_ignores_case(self, language_service):
        add_language(language_service, "en")

        with pytest.raises(ResourceNotFoundError):
            language_service.find_by_code("EN")
        assert language_service.resolve_code("EN").code == "en"


# =============================================================================
# Default language invariant
# =============================================================================


class TestDefaultInvariant:
    def test_first_language_becomes_default(self, language_service):
        created = add_language(language_service, "en", is_default=False)

        assert created.is_default
        assert defaults(language_service) == ["en"]

    def test_creating_default_clears_others(self, language_service):
        add_language(language_service, "en")
        add_language(language_service, "fr", is_default=True)

        assert defaults(language_service) == ["fr"]

    def test_update_to_default_clears_others(self, language_service):
        add_language(language_service, "en")
        fr = add_language(language_service, "fr")

        language_service.update(fr.id, LanguageUpdate(is_default=True))

        assert defaults(language_service) == ["fr"]

    def test_cannot_undefault_only_language(self, language_service):
        en = add_language(language_service, "en")

        updated = language_service.update(en.id, LanguageUpdate(is_default=False, name="Eng"))

        assert updated.is_default
        assert updated.name == "Eng"

    def test_undefault_promotes_another_active_language(self, language_service):
        en = add_language(language_service, "en")
        add_language(language_service, "de", active=False)
        add_language(language_service, "fr")

        language_service.update(en.id, LanguageUpdate(is_default=False))

        assert defaults(language_service) == ["fr"]

    def test_set_as_default(self, language_service):
        add_language(language_service, "en")
        fr = add_language(language_service, "fr")

        language_service.set_as_default(fr.id)

        assert defaults(language_service) == ["fr"]

    def test_set_as_default_unknown_keeps_current_default(self, language_service):
        add_language(language_service, "en")

        with pytest.raises(ResourceNotFoundError):
            language_service.set_as_default("missing")

        assert defaults(language_service) == ["en"]

    def test_exactly_one_default_across_operations(self, language_service, session_factory):
        en = add_language(language_service, "en")
        fr = add_language(language_service, "fr", is_default=True)
        de = add_language(language_service, "de")
        language_service.set_as_default(de.id)
        language_service.update(de.id, LanguageUpdate(is_default=False))
        language_service.remove(fr.id)
        language_service.update(en.id, LanguageUpdate(is_default=True))

        with session_factory() as session:
            flagged = session.exec(select(Language).where(Language.is_default)).all()
        assert len(flagged) == 1


# =============================================================================
# Removal
# =============================================================================


class TestRemove:
    def test_last_language_is_protected(self, language_service):
        en = add_language(language_service, "en")

        with pytest.raises(InvariantViolationError):
            language_service.remove(en.id)

        assert language_service.find_by_id(en.id)

    def test_unknown_id_is_not_found(self, language_service):
        add_language(language_service, "en")

        with pytest.raises(ResourceNotFoundError):
            language_service.remove("missing")

    def test_removing_default_promotes_active_language(self, language_service):
        en = add_language(language_service, "en")
        add_language(language_service, "de", active=False)
        add_language(language_service, "fr")

        language_service.remove(en.id)

        assert defaults(language_service) == ["fr"]

    def test_removing_default_falls_back_to_inactive(self, language_service):
        en = add_language(language_service, "en")
        add_language(language_service, "de", active=False)

        language_service.remove(en.id)

        assert defaults(language_service) == ["de"]

    def test_removing_default_without_successor_is_rejected(
        self, language_service, monkeypatch
    ):
        en = add_language(language_service, "en")
        add_language(language_service, "fr")
        monkeypatch.setattr(
            language_service_module, "_pick_successor", lambda session, excluded_id: None
        )

        with pytest.raises(InvariantViolationError) as exc_info:
            language_service.remove(en.id)

        assert exc_info.value.details["invariant"] == "single_default_language"
        assert language_service.find_by_id(en.id).is_default


# =============================================================================
# Default language cache
# =============================================================================


class TestDefaultLanguageCache:
    def test_uses_injected_empty_cache(self, session_factory, clock):
        injected = TTLCache(ttl_seconds=5, clock=clock, name="default_language")
        service = LanguageService(session_factory, cache=injected)

        assert service.cache is injected
        add_language(service, "en")
        service.get_default_language()
        assert len(injected) == 1

    def test_missing_default(self, language_service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            language_service.get_default_language()

        assert exc_info.value.message == "Default language not found"

    def test_cached_for_an_hour(self, language_service, session_factory, clock):
        en = add_language(language_service, "en")
        assert language_service.get_default_language().code == "en"

        with session_factory() as session:
            row = session.get(Language, en.id)
            row.name = "Renamed outside"
            session.add(row)
            session.commit()

        clock.advance(3599)
        assert language_service.get_default_language().name == "Language en"
        clock.advance(1)
        assert language_service.get_default_language().name == "Renamed outside"

    @pytest.mark.parametrize("operation", ["create", "set_default", "update", "remove"])
    def test_default_changing_writes_invalidate(self, language_service, operation):
        en = add_language(language_service, "en")
        fr = add_language(language_service, "fr")
        assert language_service.get_default_language().code == "en"

        if operation == "create":
            language_service.create(LanguageCreate(code="de", name="German", is_default=True))
            expected = "de"
        elif operation == "set_default":
            language_service.set_as_default(fr.id)
            expected = "fr"
        elif operation == "update":
            language_service.update(fr.id, LanguageUpdate(is_default=True))
            expected = "fr"
        else:
            language_service.remove(en.id)
            expected = "fr"

        assert language_service.get_default_language().code == expected

    def test_renaming_default_invalidates(self, language_service):
        en = add_language(language_service, "en")
        language_service.get_default_language()

        language_service.update(en.id, LanguageUpdate(name="British English"))

        assert language_service.get_default_language().name == "British English"
