__all__ = [
    "BandwiseContainer",
    "di",
    "LoggingProvider",
    "Settings",
    "Secrets",
]


from . import di
from .config import Secrets, Settings
from .container import BandwiseContainer
from .logging import LoggingProvider
