"""mimefix-email -- Content-Type override for attachments of parsed emails.

Re-exports all public types: rewriter, config, models, errors, the stdlib
adapter, and the EML bytes entry point.
"""

from mimefix_email.adapters import StdlibPartAdapter
from mimefix_email.config import RewriteConfig
from mimefix_email.content_type import ContentType
from mimefix_email.eml import EMLRewriteOutcome, rewrite_eml_bytes
from mimefix_email.errors import (
    ConfigError,
    ErrorCode,
    MessageAccessError,
    RewriteException,
    RewriteIssue,
)
from mimefix_email.models import LeafOutcome, LeafRewrite, RewriteResult
from mimefix_email.rewriter import ContentTypeRewriter, create_default_rewriter

__all__ = [
    # Rewriter
    "ContentTypeRewriter",
    "create_default_rewriter",
    # Config
    "RewriteConfig",
    # Errors
    "ErrorCode",
    "RewriteIssue",
    "RewriteException",
    "ConfigError",
    "MessageAccessError",
    # Models
    "LeafOutcome",
    "LeafRewrite",
    "RewriteResult",
    "ContentType",
    # Adapters
    "StdlibPartAdapter",
    # EML
    "EMLRewriteOutcome",
    "rewrite_eml_bytes",
]
