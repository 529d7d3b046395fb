"""Adapter binding the rewriter to the stdlib ``email`` object model.

:class:`StdlibPartAdapter` implements
:class:`~mimefix_core.protocols.MailPartAdapter` for
:class:`email.message.Message` trees, whether they were parsed with the
legacy ``compat32`` policy or with ``email.policy.default``.  Zero external
dependencies.
"""

from __future__ import annotations

import logging
from email.message import Message
from typing import Sequence

logger = logging.getLogger("mimefix_email")

_CONTENT_TYPE = "Content-Type"


class StdlibPartAdapter:
    """Read and rewrite parts of an :class:`email.message.Message` tree."""

    def is_multipart(self, part: Message) -> bool:
        return part.get_content_maintype() == "multipart"

    def get_children(self, container: Message) -> Sequence[Message]:
        """Return the child parts of a ``multipart/*`` part.

        A container without any parts has a ``None`` payload and no children.

        Raises
        ------
        TypeError
            If the payload is not a list of parts (e.g. a multipart part whose
            body could not be split on its boundary).
        """
        payload = container.get_payload()
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise TypeError(
                f"{container.get_content_type()} part has a "
                f"{type(payload).__name__} payload, expected a list of parts"
            )
        return list(payload)

    def get_filename(self, leaf: Message) -> str | None:
        return leaf.get_filename()

    def get_content_type_header(self, leaf: Message) -> str:
        """Return the raw Content-Type value, unfolded.

        A part without the header carries its default type, which is
        ``message/rfc822`` inside ``multipart/digest`` and ``text/plain``
        everywhere else.
        """
        value = leaf.get(_CONTENT_TYPE)
        if value is None:
            return leaf.get_default_type()
        return "".join(str(value).splitlines())

    def set_content_type_header(self, leaf: Message, value: str) -> None:
        if _CONTENT_TYPE in leaf:
            leaf.replace_header(_CONTENT_TYPE, value)
        else:
            leaf[_CONTENT_TYPE] = value

    def set_content(self, container: Message, children: Sequence[Message]) -> None:
        container.set_payload(list(children))

    def mark_dirty(self, message: Message) -> None:
        """Refresh headers that depend on the message body.

        A ``Content-Length`` computed for the old body is dropped, and
        ``MIME-Version`` is ensured since the body now carries rewritten
        MIME headers.
        """
        if "Content-Length" in message:
            logger.debug("mimefix_email | dropping stale Content-Length header")
            del message["Content-Length"]
        if "MIME-Version" not in message:
            message["MIME-Version"] = "1.0"
