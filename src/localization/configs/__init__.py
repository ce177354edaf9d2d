from localization.configs.models import (
    ThirdPartyConfig,
    ThirdPartyConfigBase,
    ThirdPartyConfigCreate,
    ThirdPartyConfigFilter,
    ThirdPartyConfigPublic,
    ThirdPartyConfigUpdate,
)
from localization.configs.service import ConfigService

__all__ = [
    # Models
    "ThirdPartyConfig",
    "ThirdPartyConfigBase",
    "ThirdPartyConfigCreate",
    "ThirdPartyConfigFilter",
    "ThirdPartyConfigPublic",
    "ThirdPartyConfigUpdate",
    # Service
    "ConfigService",
]
