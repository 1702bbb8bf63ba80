"""Deterministic merging of ranked configuration sources.

Merge policy:
    - mapping + mapping: recursive merge by key; the lower-precedence key
      order is kept and keys only present in the higher source are appended
    - anything else (sequences, scalars, type changes, explicit null): the
      higher-precedence value replaces the lower one as a whole

Omitting a key is the only way to inherit a lower-precedence value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from layerconf.value import copy_value, normalize

__all__ = ["MergeSource", "Merger", "merge_values"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeSource:
    """One parsed configuration source and its precedence rank.

    Higher ranks win conflicts. The tree is normalized into a private copy
    on construction.
    """

    rank: int
    tree: Any
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tree", normalize(self.tree))


def merge_values(lower: Any, higher: Any) -> Any:
    """Merge two normalized trees into a new one. Neither input is mutated."""
    if isinstance(lower, dict) and isinstance(higher, dict):
        result: dict[str, Any] = {}
        for key, value in lower.items():
            if key in higher:
                result[key] = merge_values(value, higher[key])
            else:
                result[key] = copy_value(value)
        for key, value in higher.items():
            if key not in result:
                result[key] = copy_value(value)
        return result
    return copy_value(higher)


class Merger:
    """Combines ranked sources into a single tree."""

    def merge(self, sources: Iterable[MergeSource]) -> Any:
        """Merge sources by ascending rank; ties keep list order, later wins.

        Returns an empty mapping when there are no sources.
        """
        # sorted() is stable, which gives the tie-break for equal ranks
        ordered = sorted(sources, key=lambda source: source.rank)
        if not ordered:
            return {}

        result = copy_value(ordered[0].tree)
        for source in ordered[1:]:
            result = merge_values(result, source.tree)

        logger.debug(
            "Merged %d configuration sources: %s",
            len(ordered),
            ", ".join(source.name or f"<rank {source.rank}>" for source in ordered),
        )
        return result
