"""
Engine error taxonomy

- InvalidRequestError: caller input rejected before any state change
- NotFoundError: raised by collaborator stores for unknown entities;
  services let it propagate unchanged
"""
from typing import Any


class RetentionError(Exception):
    """Base class for engine errors"""


class InvalidRequestError(RetentionError, ValueError):
    """Caller-supplied input is missing, empty or out of range"""


class NotFoundError(RetentionError, LookupError):
    """A referenced card, deck or user does not exist in its store"""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")
