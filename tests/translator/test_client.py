import json

import pytest

from localization.configs import ThirdPartyConfigCreate
from localization.core.config import settings
from localization.translator import (
    LANGUAGES_PER_REQUEST,
    MAX_BATCH_SIZE,
    MAX_TEXT_LENGTH,
    map_language_code,
    split_text,
)


# =============================================================================
# Pure helpers
# =============================================================================


class TestLanguageCodeMapping:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [("zh", "zh-Hans"), ("zh-TW", "zh-Hant"), ("iw", "he"), ("jv", "jw"), ("nb", "no")],
    )
    def test_remaps_provider_codes(self, code, expected):
        assert map_language_code(code) == expected

    def test_other_codes_pass_through(self):
        assert map_language_code("fr") == "fr"


class TestSplitText:
    def test_short_text_is_one_chunk(self):
        assert split_text("hello") == ["hello"]

    def test_splits_by_length_only(self):
        text = "a" * MAX_TEXT_LENGTH + "b" * MAX_TEXT_LENGTH + "c" * 5

        chunks = split_text(text)

        assert [len(c) for c in chunks] == [MAX_TEXT_LENGTH, MAX_TEXT_LENGTH, 5]
        assert "".join(chunks) == text


# =============================================================================
# Configuration
# =============================================================================


class TestConfiguration:
    async def test_unconfigured_returns_no_result_without_requests(
        self, translator, translator_api
    ):
        assert not translator.is_configured()

        assert await translator.translate_one("Hello", "fr") is None
        assert await translator.translate_batch(["a", "b"], "fr") == [None, None]
        assert await translator.translate_to_many_targets("Hi", ["fr", "de"]) == {
            "fr": None,
            "de": None,
        }
        assert translator_api.requests == []

    async def test_picks_up_credentials_lazily(
        self, translator, translator_api, config_service
    ):
        assert await translator.translate_one("Hello", "fr") is None

        for code in (settings.TRANSLATOR_API_KEY_CODE, settings.TRANSLATOR_REGION_CODE):
            config_service.create(
                ThirdPartyConfigCreate(
                    code=code, name=code, type="string", value="x", group="translator"
                )
            )

        assert await translator.translate_one("Hello", "fr") == "Hello[fr]"

    async def test_sends_credentials_and_api_version(
        self, configured, translator, translator_api
    ):
        await translator.translate_one("Hello", "fr", "en")

        request = translator_api.requests[0]
        assert request.headers["Ocp-Apim-Subscription-Key"] == "secret-key"
        assert request.headers["Ocp-Apim-Subscription-Region"] == "westeurope"
        assert request.url.params["api-version"] == "3.0"
        assert request.url.params["from"] == "en"
        assert request.url.params["textType"] == "plain"


# =============================================================================
# translate_one
# =============================================================================


class TestTranslateOne:
    async def test_translates(self, configured, translator):
        assert await translator.translate_one("Hello", "fr") == "Hello[fr]"

    async def test_blank_text_short_circuits(self, configured, translator, translator_api):
        assert await translator.translate_one("   ", "fr") == ""
        assert translator_api.requests == []

    async def test_maps_language_codes(self, configured, translator, translator_api):
        await translator.translate_one("Hello", "zh", "nb")

        request = translator_api.requests[0]
        assert request.url.params["to"] == "zh-Hans"
        assert request.url.params["from"] == "no"

    async def test_failure_returns_none(self, configured, translator, translator_api):
        translator_api.fail_all = True

        assert await translator.translate_one("Hello", "fr") is None

    async def test_long_text_is_chunked_and_joined(
        self, configured, translator, translator_api
    ):
        text = "a" * MAX_TEXT_LENGTH + "b" * 10

        result = await translator.translate_one(text, "fr")

        assert len(translator_api.translate_requests) == 2
        assert result == f"{'a' * MAX_TEXT_LENGTH}[fr] {'b' * 10}[fr]"

    async def test_long_text_drops_failed_chunks(
        self, configured, translator, translator_api
    ):
        translator_api.fail_texts = {"b" * 10}

        result = await translator.translate_one("a" * MAX_TEXT_LENGTH + "b" * 10, "fr")

        assert result == f"{'a' * MAX_TEXT_LENGTH}[fr]"

    async def test_long_text_all_chunks_failed(
        self, configured, translator, translator_api
    ):
        translator_api.fail_all = True

        assert await translator.translate_one("a" * (MAX_TEXT_LENGTH + 1), "fr") is None


# =============================================================================
# translate_batch
# =============================================================================


class TestTranslateBatch:
    async def test_preserves_order_and_skips_empty(
        self, configured, translator, translator_api
    ):
        result = await translator.translate_batch(["a", "", "c"], "fr")

        assert result == ["a[fr]", "", "c[fr]"]
        assert translator_api.requested_texts() == ["a", "c"]

    async def test_empty_input(self, configured, translator, translator_api):
        assert await translator.translate_batch([], "fr") == []
        assert translator_api.requests == []

    async def test_chunks_at_max_batch_size(self, configured, translator, translator_api):
        texts = [f"t{i}" for i in range(MAX_BATCH_SIZE * 2 + 1)]

        result = await translator.translate_batch(texts, "fr")

        sizes = sorted(len(json.loads(r.content)) for r in translator_api.translate_requests)
        assert sizes == [1, MAX_BATCH_SIZE, MAX_BATCH_SIZE]
        assert result == [f"{t}[fr]" for t in texts]

    async def test_failed_chunk_is_isolated(self, configured, translator, translator_api):
        texts = [f"t{i}" for i in range(MAX_BATCH_SIZE + 2)]
        translator_api.fail_texts = {"t100"}  # lands in the second chunk

        result = await translator.translate_batch(texts, "fr")

        assert result[:MAX_BATCH_SIZE] == [f"t{i}[fr]" for i in range(MAX_BATCH_SIZE)]
        assert result[MAX_BATCH_SIZE:] == [None, None]


# =============================================================================
# translate_to_many_targets
# =============================================================================


class TestTranslateToManyTargets:
    async def test_matches_results_to_requested_codes(self, configured, translator):
        result = await translator.translate_to_many_targets("Hi", ["fr", "zh", "de"], "en")

        assert result == {"fr": "Hi[fr]", "zh": "Hi[zh-Hans]", "de": "Hi[de]"}

    async def test_groups_targets_per_request(self, configured, translator, translator_api):
        targets = [f"l{i}" for i in range(LANGUAGES_PER_REQUEST + 3)]

        await translator.translate_to_many_targets("Hi", targets)

        groups = sorted(len(r.url.params.get_list("to")) for r in translator_api.requests)
        assert groups == [3, LANGUAGES_PER_REQUEST]
        assert sorted(translator_api.requested_targets()) == sorted(targets)

    async def test_failed_group_leaves_its_targets_empty(
        self, configured, translator, translator_api
    ):
        targets = [f"l{i}" for i in range(LANGUAGES_PER_REQUEST + 1)]
        translator_api.fail_targets = {"l10"}

        result = await translator.translate_to_many_targets("Hi", targets)

        assert result["l10"] is None
        assert all(result[f"l{i}"] == f"Hi[l{i}]" for i in range(LANGUAGES_PER_REQUEST))

    async def test_blank_text(self, configured, translator, translator_api):
        assert await translator.translate_to_many_targets(" ", ["fr", "de"]) == {
            "fr": "",
            "de": "",
        }
        assert translator_api.requests == []

    async def test_long_text_per_target(self, configured, translator, translator_api):
        text = "a" * MAX_TEXT_LENGTH + "b"
        translator_api.fail_targets = {"de"}

        result = await translator.translate_to_many_targets(text, ["fr", "de"])

        assert result["fr"] == f"{'a' * MAX_TEXT_LENGTH}[fr] b[fr]"
        assert result["de"] is None
        assert len(translator_api.translate_requests) == 4


# =============================================================================
# detect_language
# =============================================================================


class TestDetectLanguage:
    async def test_detects(self, configured, translator):
        detected = await translator.detect_language("Bonjour")

        assert detected is not None
        assert detected.language == "fr"
        assert detected.score == pytest.approx(0.97)
        assert detected.is_translation_supported is True

    async def test_reports_unsupported_language(
        self, configured, translator, translator_api
    ):
        translator_api.detect_supported = False

        detected = await translator.detect_language("Bonjour")

        assert detected is not None
        assert detected.is_translation_supported is False

    async def test_blank_text(self, configured, translator, translator_api):
        assert await translator.detect_language("") is None
        assert translator_api.requests == []

    async def test_failure(self, configured, translator, translator_api):
        translator_api.fail_all = True

        assert await translator.detect_language("Bonjour") is None
