from fastapi import APIRouter, Depends

from localization.api.deps import require_access
from localization.api.routes import categories, configs, languages, translations

api_router = APIRouter(dependencies=[Depends(require_access)])
api_router.include_router(languages.router)
api_router.include_router(translations.router)
api_router.include_router(categories.router)
api_router.include_router(configs.router)
