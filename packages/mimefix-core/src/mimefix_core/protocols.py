"""Structural protocols for the mail object model consumed by mimefix.

The rewriting packages never touch a concrete mail library directly.  They
talk to a :class:`MailPartAdapter`, which exposes exactly the capabilities
needed to walk a MIME part tree and rewrite leaf headers, and optionally to a
:class:`MailEnvelope` that hands out the message itself.

Both protocols are ``@runtime_checkable`` so callers can validate adapters
with ``isinstance`` without inheriting from anything.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class MailPartAdapter(Protocol):
    """Read/write access to the parts of a MIME message tree.

    ``part`` arguments are opaque objects owned by the underlying mail
    library; the adapter is the only component that knows their type.
    """

    def is_multipart(self, part: Any) -> bool:
        """Return True if *part* is a ``multipart/*`` container."""
        ...

    def get_children(self, container: Any) -> Sequence[Any]:
        """Return the ordered child parts of *container*.

        Raises on malformed multipart content.
        """
        ...

    def get_filename(self, leaf: Any) -> str | None:
        """Return the attachment filename of *leaf*, or None."""
        ...

    def get_content_type_header(self, leaf: Any) -> str:
        """Return the raw Content-Type header value of *leaf*."""
        ...

    def set_content_type_header(self, leaf: Any, value: str) -> None:
        """Replace the Content-Type header value of *leaf*."""
        ...

    def set_content(self, container: Any, children: Sequence[Any]) -> None:
        """Commit *children* back into *container*'s representation."""
        ...

    def mark_dirty(self, message: Any) -> None:
        """Recompute message-level derived state after a body mutation."""
        ...


@runtime_checkable
class MailEnvelope(Protocol):
    """Wrapper from which a message object can be retrieved.

    Retrieval may fail (e.g. a spooled message that can no longer be read);
    implementations are free to raise any exception.
    """

    def get_message(self) -> Any:
        """Return the message object carried by this envelope."""
        ...
