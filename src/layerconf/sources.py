"""Source loaders producing ranked MergeSource values.

Parsing is delegated to PyYAML, which also reads JSON documents.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from layerconf.errors import (
    PathTypeConflictError,
    SourceLoadError,
    SourceNotFoundError,
    UnsupportedValueError,
)
from layerconf import path as paths
from layerconf.merge import MergeSource

__all__ = [
    "FILE_RANK",
    "ENV_RANK",
    "OVERRIDE_RANK",
    "from_mapping",
    "load_file",
    "load_environment",
]

logger = logging.getLogger(__name__)

FILE_RANK = 0
ENV_RANK = 100
OVERRIDE_RANK = 200


def from_mapping(data: Mapping[str, Any], rank: int = OVERRIDE_RANK, name: str = "overrides") -> MergeSource:
    """Wrap an in-memory mapping as a source."""
    if not isinstance(data, Mapping):
        raise SourceLoadError(source=name, reason=f"expected a mapping, got {type(data).__name__}")
    try:
        return MergeSource(rank=rank, tree=data, name=name)
    except UnsupportedValueError as e:
        raise SourceLoadError(source=name, reason=e.message, cause=e) from e


def load_file(file_path: str | Path, rank: int = FILE_RANK, required: bool = True) -> MergeSource | None:
    """Load a YAML or JSON file as a source.

    An empty file yields an empty mapping. Returns None for a missing file
    when ``required`` is False. YAML turns unquoted dates and timestamps
    (``released: 2024-01-01``) into date objects, which are not configuration
    values; quote them to keep them as strings.
    """
    path = Path(file_path)
    if not path.is_file():
        if required:
            raise SourceNotFoundError(source_path=str(path))
        logger.warning("Optional configuration file not found, skipping: %s", path)
        return None

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise SourceLoadError(source=str(path), reason=f"invalid YAML: {e}", cause=e) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SourceLoadError(
            source=str(path), reason=f"top level must be a mapping, got {type(data).__name__}"
        )

    try:
        source = MergeSource(rank=rank, tree=data, name=str(path))
    except UnsupportedValueError as e:
        reason = e.message
        if _contains_timestamp(data):
            reason += "; unquoted YAML dates and timestamps must be quoted to be read as strings"
        raise SourceLoadError(source=str(path), reason=reason, cause=e) from e
    logger.debug("Loaded configuration file %s at rank %d", path, rank)
    return source


def _contains_timestamp(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if isinstance(value, dict):
        return any(_contains_timestamp(item) for item in value.values())
    if isinstance(value, list):
        return any(_contains_timestamp(item) for item in value)
    return False


def load_environment(
    prefix: str,
    rank: int = ENV_RANK,
    separator: str = "__",
    environ: Mapping[str, str] | None = None,
) -> MergeSource:
    """Collect variables starting with ``prefix`` into a nested mapping.

    ``APP_DB__HOST=x`` with prefix ``APP_`` becomes ``{"db": {"host": "x"}}``.
    Values stay strings.
    """
    env = os.environ if environ is None else environ
    name = f"env:{prefix}"
    tree: dict[str, Any] = {}
    for variable in sorted(env):
        if not variable.startswith(prefix) or variable == prefix:
            continue
        parts = variable[len(prefix):].lower().split(separator)
        if any(not part for part in parts):
            raise SourceLoadError(source=name, reason=f"variable {variable} has an empty key segment")
        target = paths.Path(tuple(paths.Key(part) for part in parts))
        try:
            paths.assign(tree, target, env[variable])
        except PathTypeConflictError as e:
            raise SourceLoadError(source=name, reason=f"variable {variable} conflicts: {e.message}", cause=e) from e

    logger.debug("Loaded %d top-level keys from environment prefix %s", len(tree), prefix)
    return MergeSource(rank=rank, tree=tree, name=name)
