from collections.abc import Awaitable, Callable
import inspect
from typing import Annotated

from fastapi import Depends, Request

from localization.categories.service import CategoryService
from localization.configs.service import ConfigService
from localization.container import Services
from localization.core.exceptions import AuthorizationError
from localization.languages.service import LanguageService
from localization.translations.service import TranslationService

AuthCheck = Callable[[Request], bool | Awaitable[bool]]


def get_services(request: Request) -> Services:
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]


async def require_access(request: Request) -> None:
    """Delegate to the app's auth check, if one was injected.

    Without a check every request is permitted.

    Raises:
        AuthorizationError: If the check returns a falsy value
    """
    check: AuthCheck | None = getattr(request.app.state, "auth_check", None)
    if check is None:
        return
    allowed = check(request)
    if inspect.isawaitable(allowed):
        allowed = await allowed
    if not allowed:
        raise AuthorizationError()


def get_config_service(services: ServicesDep) -> ConfigService:
    return services.configs


def get_language_service(services: ServicesDep) -> LanguageService:
    return services.languages


def get_translation_service(services: ServicesDep) -> TranslationService:
    return services.translations


def get_category_service(services: ServicesDep) -> CategoryService:
    return services.categories


ConfigServiceDep = Annotated[ConfigService, Depends(get_config_service)]
LanguageServiceDep = Annotated[LanguageService, Depends(get_language_service)]
TranslationServiceDep = Annotated[TranslationService, Depends(get_translation_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
