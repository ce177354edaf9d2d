"""Every table model, imported together so relationships can resolve.

Import this module before touching the database outside the application
(alembic, scripts, tests).
"""

from localization.categories.models import Category
from localization.configs.models import ThirdPartyConfig
from localization.languages.models import Language
from localization.translations.models import Translation

__all__ = ["Category", "Language", "ThirdPartyConfig", "Translation"]
