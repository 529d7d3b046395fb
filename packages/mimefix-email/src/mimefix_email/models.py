"""Pydantic models and enumerations for the mimefix-email package.

Contains the per-leaf ``LeafOutcome``, the ``LeafRewrite`` record, and the
``RewriteResult`` returned by a rewriting pass.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from mimefix_email.errors import RewriteIssue

__all__ = [
    "LeafOutcome",
    "LeafRewrite",
    "RewriteResult",
]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class LeafOutcome(str, Enum):
    """What happened to a single leaf part during traversal."""

    REWRITTEN = "rewritten"
    NO_FILENAME = "no_filename"
    NO_MATCH = "no_match"
    EXCLUDED = "excluded"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class LeafRewrite(BaseModel):
    """A Content-Type header that was rewritten."""

    part_path: str
    filename: str
    before: str
    after: str


# ---------------------------------------------------------------------------
# Rewrite Result
# ---------------------------------------------------------------------------


class RewriteResult(BaseModel):
    """Final result of one rewriting pass over a message."""

    changed: bool = False
    rewritten: list[LeafRewrite] = []
    issues: list[RewriteIssue] = []
    leaves_examined: int = 0
    containers_committed: int = 0
    processing_time_seconds: float = 0.0

    @property
    def warnings(self) -> list[str]:
        """Codes of all recovered issues, in the order they occurred."""
        return [issue.code.value for issue in self.issues]
