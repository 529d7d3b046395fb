"""ContentTypeRewriter -- orchestrator and public API for mimefix-email.

Walks the MIME part tree of an already-parsed message depth-first and
overrides the Content-Type primary/sub type of every attachment whose
filename matches the configured pattern, unless its current subtype already
matches the exclusion pattern.  Containers whose children changed are
re-committed, and the top-level message is marked dirty so derived headers
are refreshed before it is re-serialized.

Only construction (``ConfigError``) and retrieval of the message itself
(``MessageAccessError``) can fail.  Problems with individual parts are
logged, recorded as issues on the :class:`RewriteResult`, and leave the part
unchanged.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any

from mimefix_core.protocols import MailEnvelope, MailPartAdapter

from mimefix_email.adapters import StdlibPartAdapter
from mimefix_email.config import RewriteConfig
from mimefix_email.content_type import ContentType
from mimefix_email.errors import (
    ConfigError,
    ErrorCode,
    MessageAccessError,
    RewriteIssue,
)
from mimefix_email.models import LeafOutcome, LeafRewrite, RewriteResult

logger = logging.getLogger("mimefix_email")


class _RewriteContext:
    """Bookkeeping for a single rewriting pass."""

    def __init__(self, root: Any) -> None:
        self.root = root
        self.rewritten: list[LeafRewrite] = []
        self.issues: list[RewriteIssue] = []
        self.leaves_examined = 0
        self.containers_committed = 0

    def record(self, code: ErrorCode, message: str, stage: str, part_path: str) -> None:
        self.issues.append(
            RewriteIssue(
                code=code,
                message=message,
                stage=stage,
                recoverable=True,
                part_path=part_path,
            )
        )


def _child_path(parent: str, index: int) -> str:
    return f"{parent}.{index}" if parent else str(index)


class ContentTypeRewriter:
    """Override Content-Type values of matching attachments.

    Parameters
    ----------
    config:
        Immutable rewriter configuration.
    adapter:
        Access to the mail object model.  Defaults to
        :class:`~mimefix_email.adapters.StdlibPartAdapter`.

    Raises
    ------
    ConfigError
        If the file pattern cannot be compiled or the adapter does not
        satisfy :class:`~mimefix_core.protocols.MailPartAdapter`.

    The instance holds no per-message state, so it may be shared between
    threads as long as each thread works on a different message.
    """

    def __init__(
        self,
        config: RewriteConfig,
        adapter: MailPartAdapter | None = None,
    ) -> None:
        self._config = config
        self._adapter = adapter if adapter is not None else StdlibPartAdapter()
        if not isinstance(self._adapter, MailPartAdapter):
            raise ConfigError(
                f"{type(self._adapter).__name__} does not implement MailPartAdapter"
            )

        try:
            self._file_re = re.compile(config.file_pattern)
        except (re.error, TypeError) as exc:
            raise ConfigError(
                f"Could not compile regex [{config.file_pattern}]: {exc}"
            ) from exc

        exclusion = config.sub_type_exclusion_pattern
        if exclusion is not None:
            try:
                re.compile(exclusion)
            except re.error as exc:
                logger.warning(
                    "mimefix_email | code=%s | detail=exclusion pattern [%s] "
                    "does not compile (%s); it will never exclude a part",
                    ErrorCode.W_EXCLUSION_PATTERN_INVALID.value,
                    exclusion,
                    exc,
                )

    @property
    def config(self) -> RewriteConfig:
        return self._config

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(file_pattern={self._config.file_pattern!r}, "
            f"target={self._config.target_primary_type}/{self._config.target_sub_type})"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def can_handle(self, message: Any) -> bool:
        """Return True if *message* is a ``multipart/*`` message.

        Attachments only occur inside multipart messages, so anything else
        is left alone.
        """
        try:
            return self._adapter.is_multipart(message)
        except Exception as exc:
            logger.error(
                "mimefix_email | code=%s | detail=%s",
                ErrorCode.E_MESSAGE_CONTENT_TYPE.value,
                exc,
            )
            raise MessageAccessError(
                f"Could not retrieve content type of message: {exc}",
                code=ErrorCode.E_MESSAGE_CONTENT_TYPE,
            ) from exc

    def process(self, message: Any) -> bool:
        """Rewrite *message* in place and return True if anything changed."""
        return self.rewrite(message).changed

    def rewrite(self, message: Any) -> RewriteResult:
        """Rewrite *message* in place and return the detailed result.

        Raises
        ------
        MessageAccessError
            If *message* is missing or its top-level type cannot be read.
        """
        start = time.monotonic()
        if message is None:
            logger.error(
                "mimefix_email | code=%s | detail=no message to process",
                ErrorCode.E_MESSAGE_UNAVAILABLE.value,
            )
            raise MessageAccessError("No message to process")

        if not self.can_handle(message):
            logger.debug("mimefix_email | message is not multipart, nothing to do")
            return RewriteResult(processing_time_seconds=time.monotonic() - start)

        ctx = _RewriteContext(root=message)
        changed = self._evaluate(message, ctx, path="", depth=1)
        elapsed = time.monotonic() - start

        logger.info(
            "mimefix_email | changed=%s | leaves=%d | rewritten=%d | "
            "issues=%d | time=%.3fs",
            changed,
            ctx.leaves_examined,
            len(ctx.rewritten),
            len(ctx.issues),
            elapsed,
        )

        return RewriteResult(
            changed=changed,
            rewritten=ctx.rewritten,
            issues=ctx.issues,
            leaves_examined=ctx.leaves_examined,
            containers_committed=ctx.containers_committed,
            processing_time_seconds=elapsed,
        )

    def service(self, envelope: MailEnvelope) -> RewriteResult:
        """Retrieve the message carried by *envelope* and rewrite it.

        Raises
        ------
        MessageAccessError
            If the envelope cannot produce its message.
        """
        try:
            message = envelope.get_message()
        except Exception as exc:
            logger.error(
                "mimefix_email | code=%s | detail=%s",
                ErrorCode.E_MESSAGE_UNAVAILABLE.value,
                exc,
            )
            raise MessageAccessError(
                f"Could not retrieve message from envelope: {exc}"
            ) from exc
        return self.rewrite(message)

    def evaluate(self, part: Any, *, root: Any = None) -> bool:
        """Evaluate a single part tree and return True if it changed.

        Non-container parts are never evaluated on their own and return
        False.  When *part* is *root*, the message is marked dirty after a
        change.
        """
        return self._evaluate(part, _RewriteContext(root=root), path="", depth=1)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _evaluate(self, part: Any, ctx: _RewriteContext, path: str, depth: int) -> bool:
        adapter = self._adapter
        try:
            if not adapter.is_multipart(part):
                return False

            if depth > self._config.max_depth:
                logger.warning(
                    "mimefix_email | part=%s | code=%s | detail=nesting deeper than %d",
                    path,
                    ErrorCode.W_DEPTH_LIMIT_EXCEEDED.value,
                    self._config.max_depth,
                )
                ctx.record(
                    ErrorCode.W_DEPTH_LIMIT_EXCEEDED,
                    f"Multipart nesting deeper than {self._config.max_depth} levels skipped",
                    stage="evaluate",
                    part_path=path,
                )
                return False

            children = adapter.get_children(part)
            logger.debug(
                "mimefix_email | part=%s | multipart with %d children", path, len(children)
            )

            changed = False
            for index, child in enumerate(children, start=1):
                changed |= self._evaluate_child(child, ctx, _child_path(path, index), depth)

            if changed:
                adapter.set_content(part, children)
                ctx.containers_committed += 1
                if ctx.root is not None and part is ctx.root:
                    adapter.mark_dirty(part)
            return changed
        except Exception as exc:
            logger.warning(
                "mimefix_email | part=%s | code=%s | detail=Could not evaluate part: %s",
                path,
                ErrorCode.W_SUBTREE_EVAL_FAILED.value,
                exc,
            )
            ctx.record(
                ErrorCode.W_SUBTREE_EVAL_FAILED,
                f"Could not evaluate part: {exc}",
                stage="evaluate",
                part_path=path,
            )
            return False

    def _evaluate_child(
        self, child: Any, ctx: _RewriteContext, path: str, depth: int
    ) -> bool:
        try:
            is_container = self._adapter.is_multipart(child)
        except Exception as exc:
            self._leaf_failed(exc, ctx, path)
            return False

        if is_container:
            return self._evaluate(child, ctx, path, depth + 1)
        return self._rewrite_leaf(child, ctx, path) is LeafOutcome.REWRITTEN

    def _rewrite_leaf(self, leaf: Any, ctx: _RewriteContext, path: str) -> LeafOutcome:
        """Apply the match/exclude/rewrite steps to one leaf part."""
        adapter = self._adapter
        config = self._config
        ctx.leaves_examined += 1
        try:
            filename = adapter.get_filename(leaf)
            if not filename:
                return LeafOutcome.NO_FILENAME

            if not self._filename_matches(filename, path):
                return LeafOutcome.NO_MATCH

            before = adapter.get_content_type_header(leaf)
            current = ContentType.parse(before)
            if self._is_excluded(current.sub_type, ctx, path):
                logger.debug(
                    "mimefix_email | part=%s | subtype %s is excluded",
                    path,
                    current.sub_type,
                )
                return LeafOutcome.EXCLUDED

            after = str(current.with_type(config.target_primary_type, config.target_sub_type))
            if after == before:
                logger.debug("mimefix_email | part=%s | header already %s", path, after)

            logger.info("mimefix_email | part=%s | before=%s", path, before)
            adapter.set_content_type_header(leaf, after)
            logger.info("mimefix_email | part=%s | after=%s", path, after)

            ctx.rewritten.append(
                LeafRewrite(part_path=path, filename=filename, before=before, after=after)
            )
            return LeafOutcome.REWRITTEN
        except Exception as exc:
            self._leaf_failed(exc, ctx, path)
            return LeafOutcome.FAILED

    def _leaf_failed(self, exc: Exception, ctx: _RewriteContext, path: str) -> None:
        logger.warning(
            "mimefix_email | part=%s | code=%s | detail=Could not set Content-Type: %s",
            path,
            ErrorCode.W_LEAF_REWRITE_FAILED.value,
            exc,
        )
        ctx.record(
            ErrorCode.W_LEAF_REWRITE_FAILED,
            f"Could not set Content-Type: {exc}",
            stage="rewrite",
            part_path=path,
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _filename_matches(self, name: str, path: str) -> bool:
        result = self._file_re.fullmatch(name) is not None
        logger.debug(
            "mimefix_email | part=%s | attachment %s %s",
            path,
            name,
            "matches" if result else "does not match",
        )
        return result

    def _is_excluded(self, sub_type: str, ctx: _RewriteContext, path: str) -> bool:
        pattern = self._config.sub_type_exclusion_pattern
        if pattern is None:
            return False
        try:
            return re.fullmatch(pattern, sub_type) is not None
        except re.error as exc:
            logger.warning(
                "mimefix_email | part=%s | code=%s | detail=exclusion pattern [%s]: %s",
                path,
                ErrorCode.W_EXCLUSION_PATTERN_INVALID.value,
                pattern,
                exc,
            )
            ctx.record(
                ErrorCode.W_EXCLUSION_PATTERN_INVALID,
                f"Exclusion pattern [{pattern}] could not be applied: {exc}",
                stage="rewrite",
                part_path=path,
            )
            return False


def create_default_rewriter(**overrides: Any) -> ContentTypeRewriter:
    """Create a ContentTypeRewriter for the stdlib ``email`` object model.

    Accepts either a ready ``config`` or the individual configuration
    parameters (Python or mailet-style names), plus an optional ``adapter``.

    Raises
    ------
    ConfigError
        If the parameters do not form a valid configuration.
    """
    adapter = overrides.pop("adapter", None)
    config = overrides.pop("config", None)
    if config is None:
        config = RewriteConfig.from_parameters(overrides)

    return ContentTypeRewriter(config=config, adapter=adapter)
