"""Config module initialization"""

from .settings import Settings, get_settings
from .sports_config import SPORT_KEYWORDS, UNKNOWN_SPORT, extract_sport

__all__ = [
    "Settings",
    "get_settings",
    "SPORT_KEYWORDS",
    "UNKNOWN_SPORT",
    "extract_sport",
]
