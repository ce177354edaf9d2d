"""Microsoft Translator (API v3) client.

Every public call is best-effort: a failed request, a timeout or a malformed
response only degrades the items it carried to None ("no translation").
Nothing here raises for per-item failures, so a single bad chunk can never
abort a whole batch or fan-out.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel

from localization.configs.service import ConfigService
from localization.core.config import settings
from localization.core.http import create_http_client, provider_timeout
from localization.core.logging import get_logger

logger = get_logger(__name__)

MAX_BATCH_SIZE = 100
MAX_TEXT_LENGTH = 10_000
LANGUAGES_PER_REQUEST = 10

# Codes the provider does not accept as-is.
LANGUAGE_CODE_MAPPINGS: dict[str, str] = {
    "zh": "zh-Hans",
    "zh-TW": "zh-Hant",
    "iw": "he",
    "jv": "jw",
    "nb": "no",
}


class DetectedLanguage(BaseModel):
    language: str
    score: float
    is_translation_supported: bool = True


def map_language_code(code: str) -> str:
    return LANGUAGE_CODE_MAPPINGS.get(code, code)


def split_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> list[str]:
    """Split text into consecutive chunks of at most max_length characters.

    Splits strictly by length, so words and sentences may be cut.
    """
    if len(text) <= max_length:
        return [text]
    return [text[i : i + max_length] for i in range(0, len(text), max_length)]


def _chunked(items: Sequence[Any], size: int) -> list[Sequence[Any]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class MicrosoftTranslatorClient:
    """Async wrapper around the Microsoft Translator REST API.

    Credentials come from the config store (see load_config). While they are
    missing the client is unconfigured and every translate call returns None
    for each input without touching the network.
    """

    def __init__(
        self,
        config_service: ConfigService,
        http_client: httpx.AsyncClient | None = None,
        api_version: str | None = None,
    ) -> None:
        self._config_service = config_service
        self._client = http_client or create_http_client(
            settings.TRANSLATOR_ENDPOINT, timeout=provider_timeout()
        )
        self._api_version = api_version or settings.TRANSLATOR_API_VERSION
        self._api_key: str | None = None
        self._region: str | None = None

    def load_config(self) -> None:
        """Read the API key and region from the config store.

        Missing entries are logged and leave the client unconfigured.
        """
        codes = {settings.TRANSLATOR_API_KEY_CODE, settings.TRANSLATOR_REGION_CODE}
        entries = self._config_service.get_many(codes)
        api_key = entries.get(settings.TRANSLATOR_API_KEY_CODE)
        region = entries.get(settings.TRANSLATOR_REGION_CODE)

        self._api_key = api_key.value if api_key else None
        self._region = region.value if region else None
        if not self.is_configured():
            logger.warning(
                "translator_config_missing",
                missing=sorted(code for code in codes if not entries.get(code)),
            )

    def is_configured(self) -> bool:
        return bool(self._api_key and self._region)

    def ensure_configured(self) -> bool:
        """Retry load_config() once when credentials are not yet known."""
        if not self.is_configured():
            self.load_config()
        return self.is_configured()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def detect_language(self, text: str) -> DetectedLanguage | None:
        if not text.strip() or not self.ensure_configured():
            return None

        try:
            data = await self._post("/detect", [{"text": text}], {})
            result = data[0]
            return DetectedLanguage(
                language=result["language"],
                score=result["score"],
                is_translation_supported=result.get("isTranslationSupported", True),
            )
        except (httpx.HTTPError, ValueError, LookupError, TypeError) as e:
            logger.warning("translator_request_failed", operation="detect", error=str(e))
            return None

    async def translate_one(
        self, text: str, target: str, source: str | None = None
    ) -> str | None:
        """Translate a single text.

        Blank text returns "" without a request. Text longer than
        MAX_TEXT_LENGTH is translated chunk by chunk in parallel and the
        successful chunks are joined with a space.
        """
        if not self.ensure_configured():
            return None
        if not text.strip():
            return ""

        target = map_language_code(target)
        source = map_language_code(source) if source else None
        if len(text) > MAX_TEXT_LENGTH:
            return await self._translate_long_text(text, target, source)
        return await self._translate_chunk(text, target, source)

    async def translate_batch(
        self, texts: Sequence[str], target: str, source: str | None = None
    ) -> list[str | None]:
        """Translate texts into one language, preserving index correspondence.

        Empty inputs map to "" without a request. The rest are sent in
        chunks of MAX_BATCH_SIZE issued concurrently; a failed chunk leaves
        its slots at None.
        """
        if not texts:
            return []
        if not self.ensure_configured():
            return [None] * len(texts)

        target = map_language_code(target)
        source = map_language_code(source) if source else None

        results: list[str | None] = [None] * len(texts)
        pending: list[tuple[int, str]] = []
        for index, text in enumerate(texts):
            stripped = (text or "").strip()
            if stripped:
                pending.append((index, stripped))
            else:
                results[index] = ""

        async def run_chunk(chunk: Sequence[tuple[int, str]]) -> None:
            params = self._params(target, source)
            try:
                data = await self._post(
                    "/translate", [{"text": text} for _, text in chunk], params
                )
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(
                    "translator_request_failed",
                    operation="batch",
                    target=target,
                    size=len(chunk),
                    error=str(e),
                )
                return
            for (index, _), item in zip(chunk, data, strict=False):
                results[index] = _first_translation(item)

        await asyncio.gather(
            *(run_chunk(chunk) for chunk in _chunked(pending, MAX_BATCH_SIZE))
        )
        return results

    async def translate_to_many_targets(
        self, text: str, targets: Sequence[str], source: str | None = None
    ) -> dict[str, str | None]:
        """Translate one text into several languages.

        Returns a mapping keyed by the caller's target codes. Short text is
        sent with up to LANGUAGES_PER_REQUEST targets per request and the
        translations are matched back by their returned "to" code. Long text
        is chunked and rejoined separately for every target.
        """
        results: dict[str, str | None] = {target: None for target in targets}
        if not self.ensure_configured():
            return results
        if not text.strip():
            return {target: "" for target in targets}

        source = map_language_code(source) if source else None

        if len(text) > MAX_TEXT_LENGTH:

            async def run_target(target: str) -> None:
                results[target] = await self._translate_long_text(
                    text, map_language_code(target), source
                )

            await asyncio.gather(*(run_target(target) for target in targets))
            return results

        async def run_group(group: Sequence[str]) -> None:
            mapped = [map_language_code(target) for target in group]
            params = self._params(mapped, source)
            try:
                data = await self._post("/translate", [{"text": text}], params)
                translations = data[0]["translations"]
            except (httpx.HTTPError, ValueError, LookupError, TypeError) as e:
                logger.warning(
                    "translator_request_failed",
                    operation="multi_target",
                    targets=list(group),
                    error=str(e),
                )
                return
            by_code = {
                str(item.get("to", "")).lower(): item.get("text")
                for item in translations
                if isinstance(item, dict)
            }
            for target, mapped_code in zip(group, mapped, strict=True):
                translated = by_code.get(mapped_code.lower())
                if translated is not None:
                    results[target] = translated

        await asyncio.gather(
            *(run_group(group) for group in _chunked(list(targets), LANGUAGES_PER_REQUEST))
        )
        return results

    async def _translate_long_text(
        self, text: str, target: str, source: str | None
    ) -> str | None:
        chunks = await asyncio.gather(
            *(self._translate_chunk(chunk, target, source) for chunk in split_text(text))
        )
        joined = " ".join(chunk for chunk in chunks if chunk)
        return joined or None

    async def _translate_chunk(
        self, text: str, target: str, source: str | None
    ) -> str | None:
        try:
            data = await self._post(
                "/translate", [{"text": text}], self._params(target, source)
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "translator_request_failed",
                operation="single",
                target=target,
                length=len(text),
                error=str(e),
            )
            return None
        return _first_translation(data[0]) if data else None

    def _params(self, target: str | list[str], source: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {"to": target, "textType": "plain"}
        if source:
            params["from"] = source
        return params

    async def _post(
        self, path: str, body: list[dict[str, str]], params: dict[str, Any]
    ) -> list[Any]:
        response = await self._client.post(
            path,
            json=body,
            params={"api-version": self._api_version, **params},
            headers={
                "Ocp-Apim-Subscription-Key": self._api_key or "",
                "Ocp-Apim-Subscription-Region": self._region or "",
            },
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Unexpected translator response: {type(data).__name__}")
        return data


def _first_translation(item: Any) -> str | None:
    if not isinstance(item, dict):
        return None
    translations = item.get("translations") or []
    if not translations or not isinstance(translations[0], dict):
        return None
    return translations[0].get("text")
