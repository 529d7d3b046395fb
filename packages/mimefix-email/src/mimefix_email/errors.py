"""Error codes, structured error model, and exceptions for mimefix-email.

``ErrorCode`` contains all rewriter-specific error/warning codes plus the
shared codes from the core taxonomy.  ``RewriteIssue`` extends
``BaseRewriteError`` with the MIME part location.

Only two failures ever reach a caller as exceptions: ``ConfigError`` when a
rewriter cannot be configured, and ``MessageAccessError`` when the message
itself cannot be obtained.  Problems with individual parts are recorded as
``W_*`` issues on the result instead.
"""

from __future__ import annotations

from enum import Enum

from mimefix_core.errors import BaseRewriteError


class ErrorCode(str, Enum):
    """Error codes for mimefix-email.

    Fatal codes use an ``E_`` prefix; warnings use ``W_``.
    Values equal their names for stable metric/alerting strings.
    """

    # Fatal errors (reused from core taxonomy)
    E_CONFIG_INVALID = "E_CONFIG_INVALID"
    E_MESSAGE_UNAVAILABLE = "E_MESSAGE_UNAVAILABLE"
    E_MESSAGE_CONTENT_TYPE = "E_MESSAGE_CONTENT_TYPE"

    # Warnings (non-fatal, recovered locally)
    W_LEAF_REWRITE_FAILED = "W_LEAF_REWRITE_FAILED"
    W_SUBTREE_EVAL_FAILED = "W_SUBTREE_EVAL_FAILED"
    W_EXCLUSION_PATTERN_INVALID = "W_EXCLUSION_PATTERN_INVALID"
    W_DEPTH_LIMIT_EXCEEDED = "W_DEPTH_LIMIT_EXCEEDED"


class RewriteIssue(BaseRewriteError):
    """Structured error for the rewriting pipeline.

    Narrows the ``code`` field to ``ErrorCode`` and records the dotted path
    of the MIME part the issue refers to (``""`` for the message root).
    """

    code: ErrorCode  # type: ignore[assignment]  # narrows base str to ErrorCode
    part_path: str | None = None


class RewriteException(Exception):
    """Raisable exception wrapping a :class:`RewriteIssue`.

    The structured issue is available as ``.error``; the common fields are
    exposed as properties.
    """

    def __init__(self, **kwargs: object) -> None:
        self.error = RewriteIssue(**kwargs)  # type: ignore[arg-type]
        super().__init__(self.error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def stage(self) -> str | None:
        return self.error.stage

    @property
    def recoverable(self) -> bool:
        return self.error.recoverable


class ConfigError(RewriteException, ValueError):
    """The rewriter configuration is missing a value or is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.E_CONFIG_INVALID,
            message=message,
            stage="config",
        )


class MessageAccessError(RewriteException):
    """The message could not be retrieved or its top-level type read."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.E_MESSAGE_UNAVAILABLE
    ) -> None:
        super().__init__(code=code, message=message, stage="access", part_path="")
