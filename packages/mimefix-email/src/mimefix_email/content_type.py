"""Content-Type header value with a verbatim parameter tail.

:class:`ContentType` splits a raw header value into its ``primary/sub`` type
pair and everything after the first ``;``.  Only the type pair is ever
rewritten; the parameter text (``; name="report.xml"; charset=...``) is kept
exactly as it was so boundaries, names, and encodings survive untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

# RFC 2045 token: any CHAR except SPACE, CTLs, or tspecials.
TOKEN_RE = re.compile(r"[^\x00-\x20\x7f()<>@,;:\\\"/\[\]?=]+")


@dataclass(frozen=True)
class ContentType:
    """Parsed Content-Type value.

    Attributes
    ----------
    primary_type:
        Media type, e.g. ``application``.
    sub_type:
        Media subtype, e.g. ``octet-stream``.
    parameters:
        Raw text from the first ``;`` to the end of the value, or ``""``.
    """

    primary_type: str
    sub_type: str
    parameters: str = ""

    @classmethod
    def parse(cls, raw: str) -> ContentType:
        """Parse a raw Content-Type header value.

        Raises
        ------
        ValueError
            If the value does not start with a ``primary/sub`` token pair.
        """
        if raw is None:
            raise ValueError("Content-Type value is missing")

        value = raw.strip()
        semi = value.find(";")
        if semi == -1:
            type_text, parameters = value, ""
        else:
            type_text, parameters = value[:semi], value[semi:]

        primary, sep, sub = type_text.strip().partition("/")
        primary = primary.strip()
        sub = sub.strip()
        if not sep or not TOKEN_RE.fullmatch(primary) or not TOKEN_RE.fullmatch(sub):
            raise ValueError(f"Malformed Content-Type value: {raw!r}")

        return cls(primary_type=primary, sub_type=sub, parameters=parameters)

    @property
    def base_type(self) -> str:
        return f"{self.primary_type}/{self.sub_type}"

    def with_type(self, primary_type: str, sub_type: str) -> ContentType:
        """Return a copy with the type pair replaced and parameters kept."""
        return replace(self, primary_type=primary_type, sub_type=sub_type)

    def __str__(self) -> str:
        return f"{self.base_type}{self.parameters}"
