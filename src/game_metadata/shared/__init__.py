"""共有レイヤの公開インターフェース。"""

from .config import AppSettings, IGDBSettings, get_settings
from .exceptions import BaseAppError, ConfigurationError
from .logging import configure_logging, get_logger
from .types import utc_now

__all__ = [
    "AppSettings",
    "IGDBSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "BaseAppError",
    "ConfigurationError",
    "utc_now",
]
