"""Resolved configuration for gate evaluation.

A ``GateConfig`` bundles the subject version and the flag set. Both are
resolved once per process and never mutated; the declaration API reads
them but never writes them.

Environment:
    TESTGATE_SUBJECT_VERSION  Overrides the default subject version.
    TESTGATE_FLAGS            Inline JSON object of flags.
    TESTGATE_FLAGS_FILE       Path to a JSON file holding the flag object.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Optional

import jsonschema

from .common import (
    FLAGS_ENV,
    FLAGS_FILE_ENV,
    SUBJECT_VERSION_ENV,
    ConfigError,
    UnknownFlagError,
)
from .gates.version import is_valid_version

logger = logging.getLogger(__name__)

FLAGS_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "testgate flag set",
    "type": "object",
    "propertyNames": {"pattern": "^[A-Za-z_][A-Za-z0-9_]*$"},
    "additionalProperties": {"type": ["boolean", "string", "number", "null"]},
}


class FlagSet(Mapping):
    """Immutable mapping of feature flag names to values.

    Flags are readable as attributes (``flags.enable_x``) or items
    (``flags["enable_x"]``). Reading a flag that was never defined is an
    error rather than a silent ``None``, so a misspelled flag in a gate
    predicate fails loudly.
    """

    def __init__(self, flags: Optional[Mapping] = None):
        flags = dict(flags or {})
        shadowed = sorted(set(flags) & reserved_flag_names())
        if shadowed:
            raise ConfigError(
                f"Flag names clash with FlagSet attributes: {', '.join(shadowed)}"
            )
        object.__setattr__(self, "_flags", MappingProxyType(flags))

    def __getitem__(self, name: str) -> Any:
        return self._flags[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._flags[name]
        except KeyError:
            raise UnknownFlagError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("FlagSet is immutable")

    def __repr__(self) -> str:
        return f"FlagSet({dict(self._flags)!r})"

    def to_dict(self) -> dict:
        """Return a plain dict copy of the flags."""
        return dict(self._flags)


def reserved_flag_names() -> frozenset:
    """Names that attribute access would resolve to a FlagSet method."""
    return frozenset(n for n in dir(FlagSet) if not n.startswith("_"))


@dataclass(frozen=True)
class GateConfig:
    """Subject version and flag set used by every gate evaluation."""

    subject_version: str
    flags: FlagSet = field(default_factory=FlagSet)

    def __post_init__(self):
        if not is_valid_version(self.subject_version):
            raise ConfigError(
                f"Subject version is not a valid semantic version: "
                f"{self.subject_version!r}"
            )
        if not isinstance(self.flags, FlagSet):
            object.__setattr__(self, "flags", FlagSet(self.flags))

    def to_dict(self) -> dict:
        """Convert to dictionary for CLI output."""
        return {
            "subject_version": self.subject_version,
            "flags": self.flags.to_dict(),
        }


def validate_flags(data: Any, source: str) -> dict:
    """Validate a decoded flag document.

    Args:
        data: Decoded JSON value.
        source: Where the document came from, for error messages.

    Returns:
        The validated flag dict.

    Raises:
        ConfigError: If the document does not match the flag schema.
    """
    try:
        jsonschema.validate(data, FLAGS_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Invalid flag set in {source}: {e.message}") from e
    shadowed = sorted(set(data) & reserved_flag_names())
    if shadowed:
        raise ConfigError(
            f"Invalid flag set in {source}: reserved flag names {', '.join(shadowed)}"
        )
    return data


def load_flags(environ: Optional[Mapping] = None) -> dict:
    """Load flags from the environment.

    ``TESTGATE_FLAGS`` (inline JSON) takes precedence over
    ``TESTGATE_FLAGS_FILE``. Neither set means no flags.

    Args:
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Dict of flag name to value.

    Raises:
        ConfigError: If the JSON is malformed, unreadable or invalid.
    """
    if environ is None:
        environ = os.environ

    inline = environ.get(FLAGS_ENV)
    if inline:
        try:
            data = json.loads(inline)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{FLAGS_ENV} is not valid JSON: {e}") from e
        return validate_flags(data, FLAGS_ENV)

    path = environ.get(FLAGS_FILE_ENV)
    if path:
        flags_path = Path(path)
        try:
            with open(flags_path) as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read flags file {flags_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Flags file {flags_path} is not valid JSON: {e}") from e
        return validate_flags(data, str(flags_path))

    return {}


def load_config(
    default_version: Optional[str] = None,
    flags: Optional[Mapping] = None,
    environ: Optional[Mapping] = None,
) -> GateConfig:
    """Resolve the subject version and flag set.

    Args:
        default_version: Version used when no override is set.
        flags: Extra flags merged over the environment-provided ones.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Frozen GateConfig.

    Raises:
        ConfigError: If no subject version can be resolved or any input
            is invalid.
    """
    if environ is None:
        environ = os.environ

    version = environ.get(SUBJECT_VERSION_ENV) or default_version
    if not version:
        raise ConfigError(
            f"No subject version: set {SUBJECT_VERSION_ENV} or pass a default"
        )

    resolved = load_flags(environ)
    if flags:
        resolved.update(validate_flags(dict(flags), "explicit flags"))

    config = GateConfig(subject_version=version, flags=FlagSet(resolved))
    logger.debug(
        "Resolved subject version %s with %d flags", version, len(config.flags)
    )
    return config
