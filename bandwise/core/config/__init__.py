__all__ = [
    "LoggingSettings",
    "Secrets",
    "Settings",
    "TemplateSettings",
]


from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .template import TemplateSettings
