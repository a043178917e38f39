from .config import Settings, settings
from .exceptions import RetentionError, InvalidRequestError, NotFoundError

__all__ = [
    "Settings",
    "settings",
    "RetentionError",
    "InvalidRequestError",
    "NotFoundError",
]
