"""Shared error codes and base error model for the mimefix framework.

``CoreErrorCode`` contains the codes common to all mimefix packages.
``BaseRewriteError`` is a Pydantic model that each package extends with its
own location field (e.g. ``part_path`` for MIME part trees).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class CoreErrorCode(str, Enum):
    """Error codes shared across all mimefix packages.

    Each package maintains its own *complete* ``ErrorCode`` enum that includes
    both the shared codes here and package-specific codes.  Values equal their
    names so they are stable strings suitable for metrics and alerting.
    """

    # Configuration errors
    E_CONFIG_INVALID = "E_CONFIG_INVALID"

    # Message access errors
    E_MESSAGE_UNAVAILABLE = "E_MESSAGE_UNAVAILABLE"
    E_MESSAGE_CONTENT_TYPE = "E_MESSAGE_CONTENT_TYPE"


class BaseRewriteError(BaseModel):
    """Base structured error with code, message, and context.

    Packages extend this model with a location field specific to the object
    model they walk.  The ``code`` field is typed as ``str`` so it accepts any
    package-specific ``ErrorCode`` enum member.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False
