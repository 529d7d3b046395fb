"""EML entry point using Python stdlib ``email`` module.

Parses RFC 5322 bytes, runs a :class:`ContentTypeRewriter` over the parsed
message, and re-serializes it only when something changed.  Parsing uses the
``compat32`` policy so header values are kept as raw strings and the
parameter text of a rewritten Content-Type is written out unchanged.
"""

from __future__ import annotations

import email
import email.policy
import logging
from dataclasses import dataclass

from mimefix_email.errors import ErrorCode, MessageAccessError
from mimefix_email.models import RewriteResult
from mimefix_email.rewriter import ContentTypeRewriter

logger = logging.getLogger("mimefix_email")


@dataclass
class EMLRewriteOutcome:
    """Rewritten message bytes and the result of the pass that produced them.

    ``data`` is the input unchanged when ``result.changed`` is False.
    """

    data: bytes
    result: RewriteResult


def rewrite_eml_bytes(data: bytes, rewriter: ContentTypeRewriter) -> EMLRewriteOutcome:
    """Parse *data*, rewrite matching attachments, and serialize.

    Raises
    ------
    MessageAccessError
        If *data* is empty or cannot be parsed into a message.
    """
    if not data:
        raise MessageAccessError("Message data is empty")

    try:
        msg = email.message_from_bytes(data, policy=email.policy.compat32)
    except Exception as exc:
        logger.error(
            "mimefix_email | code=%s | detail=%s",
            ErrorCode.E_MESSAGE_UNAVAILABLE.value,
            exc,
        )
        raise MessageAccessError(f"Failed to parse message: {exc}") from exc

    result = rewriter.rewrite(msg)
    if not result.changed:
        return EMLRewriteOutcome(data=data, result=result)
    return EMLRewriteOutcome(data=msg.as_bytes(), result=result)
