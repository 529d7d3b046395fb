"""Configuration model for the mimefix-email rewriter.

Provides ``RewriteConfig`` with the four pattern/type parameters and the
traversal limits.  The model is frozen: once built, a configuration never
changes for the lifetime of the rewriter that holds it.

Parameters may be given with Python names (``file_pattern``) or with the
mailet init-parameter names used in mail server configuration files
(``filePattern``, ``subTypePattern``, ``primeType``, ``subType``).
Supports loading from YAML or JSON files via the ``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib
import re
from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from mimefix_email.content_type import TOKEN_RE
from mimefix_email.errors import ConfigError

FILE_PATTERN_NAME = "filePattern"
SUBTYPE_PATTERN_NAME = "subTypePattern"
PRIMETYPE_NAME = "primeType"
SUBTYPE_NAME = "subType"


class RewriteConfig(BaseModel):
    """Immutable parameters for :class:`~mimefix_email.rewriter.ContentTypeRewriter`.

    Direct construction raises ``pydantic.ValidationError`` on bad input;
    ``from_parameters()`` and ``from_file()`` raise
    :class:`~mimefix_email.errors.ConfigError` instead.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # --- Identity ---
    parser_version: str = "mimefix_email:1.0.0"

    # --- Matching ---
    file_pattern: str = Field(
        alias=FILE_PATTERN_NAME,
        description="Regular expression an attachment filename must fully match.",
    )
    sub_type_exclusion_pattern: str | None = Field(
        default=None,
        alias=SUBTYPE_PATTERN_NAME,
        description=(
            "Regular expression matched against the current subtype; "
            "a full match leaves the part untouched."
        ),
    )

    # --- Replacement ---
    target_primary_type: str = Field(
        alias=PRIMETYPE_NAME,
        description="Primary type written into matched parts.",
    )
    target_sub_type: str = Field(
        alias=SUBTYPE_NAME,
        description="Subtype written into matched parts.",
    )

    # --- Traversal Limits ---
    max_depth: int = Field(
        default=32,
        ge=1,
        le=128,
        description="Deepest multipart nesting level evaluated; deeper subtrees are left alone.",
    )

    @field_validator("file_pattern")
    @classmethod
    def _validate_file_pattern(cls, value: str) -> str:
        if not value:
            raise ValueError(f"No value for {FILE_PATTERN_NAME} parameter was provided")
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Could not compile regex [{value}]: {exc}") from exc
        return value

    @field_validator("sub_type_exclusion_pattern")
    @classmethod
    def _empty_exclusion_is_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("target_primary_type", "target_sub_type")
    @classmethod
    def _validate_target_type(cls, value: str, info: ValidationInfo) -> str:
        name = PRIMETYPE_NAME if info.field_name == "target_primary_type" else SUBTYPE_NAME
        if not value or not value.strip():
            raise ValueError(f"No value for {name} parameter was provided")
        value = value.strip()
        if not TOKEN_RE.fullmatch(value):
            raise ValueError(f"{name} must be a single MIME token, got {value!r}")
        return value

    @classmethod
    def from_parameters(cls, params: Mapping[str, Any]) -> RewriteConfig:
        """Build a configuration from a mapping of named parameters.

        Keys may use either naming style.  ``None`` values are treated as
        absent.

        Raises
        ------
        ConfigError
            If a required parameter is missing or a value is invalid.
        """
        data = {k: v for k, v in params.items() if v is not None}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(_describe_validation_error(exc)) from exc

    @classmethod
    def from_file(cls, path: str) -> RewriteConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install pyyaml"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config file {path} must contain a mapping at top level")

        return cls.from_parameters(data)


def _describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    messages: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "Invalid rewriter configuration: " + "; ".join(messages)
