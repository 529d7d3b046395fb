"""mimefix-core -- Shared primitives for the mimefix framework.

Re-exports all public types: errors and protocols.
"""

from mimefix_core.errors import BaseRewriteError, CoreErrorCode
from mimefix_core.protocols import MailEnvelope, MailPartAdapter

__all__ = [
    # Errors
    "CoreErrorCode",
    "BaseRewriteError",
    # Protocols
    "MailPartAdapter",
    "MailEnvelope",
]
