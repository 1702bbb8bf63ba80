"""Path expressions: parsing, lookup and assignment into configuration trees.

Grammar::

    path    := segment ("." segment)*
    segment := key ("[" digits "]")*

A key is any non-empty run of characters other than ``.``, ``[`` and ``]``.
Digit-only keys stay keys; only bracketed digits address sequence positions.
"""

from __future__ import annotations

import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Union

from layerconf.errors import PathSyntaxError, PathTypeConflictError
from layerconf.value import normalize, type_name

__all__ = [
    "Key",
    "Index",
    "PathStep",
    "Path",
    "MISSING",
    "parse_path",
    "resolve",
    "assign",
    "render_steps",
    "PathResolver",
]

_INDEX_RE = re.compile(r"[0-9]+")


class _Missing:
    """Sentinel type for an absent node."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Key:
    """Navigate into a mapping by key."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    """Navigate into a sequence by position."""

    position: int

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"Index position must be non-negative, got {self.position}")

    def __str__(self) -> str:
        return f"[{self.position}]"


PathStep = Union[Key, Index]


@dataclass(frozen=True)
class Path:
    """An immutable, non-empty sequence of navigation steps."""

    steps: tuple[PathStep, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A path needs at least one step")

    @classmethod
    def parse(cls, expression: str) -> Path:
        return parse_path(expression)

    @property
    def parent(self) -> Path | None:
        """The path without its last step, or None for a single-step path."""
        if len(self.steps) == 1:
            return None
        return Path(self.steps[:-1])

    def child(self, step: PathStep) -> Path:
        return Path(self.steps + (step,))

    def __str__(self) -> str:
        return render_steps(self.steps)

    def __len__(self) -> int:
        return len(self.steps)


def render_steps(steps: tuple[PathStep, ...] | list[PathStep]) -> str:
    """Render steps back to their canonical expression. Empty steps render as ''."""
    parts: list[str] = []
    for step in steps:
        if isinstance(step, Key) and parts:
            parts.append(".")
        parts.append(str(step))
    return "".join(parts)


def parse_path(expression: str) -> Path:
    """Parse a path expression into a Path.

    Raises:
        PathSyntaxError: If the expression does not follow the grammar.
    """
    if not isinstance(expression, str):
        raise PathSyntaxError(repr(expression), "path expression must be a string")
    if not expression:
        raise PathSyntaxError(expression, "path expression is empty")

    steps: list[PathStep] = []
    for number, segment in enumerate(expression.split("."), start=1):
        steps.extend(_parse_segment(expression, segment, number))
    return Path(tuple(steps))


def _parse_segment(expression: str, segment: str, number: int) -> list[PathStep]:
    if not segment:
        raise PathSyntaxError(expression, f"segment {number} is empty")

    bracket = segment.find("[")
    key = segment if bracket == -1 else segment[:bracket]
    if "]" in key:
        raise PathSyntaxError(expression, f"unmatched ']' in segment {segment!r}")
    if not key:
        raise PathSyntaxError(expression, f"segment {segment!r} has an index but no key")

    steps: list[PathStep] = [Key(key)]
    rest = segment[len(key):]
    while rest:
        if rest[0] != "[":
            raise PathSyntaxError(
                expression, f"unexpected {rest[0]!r} after index in segment {segment!r}"
            )
        close = rest.find("]")
        if close == -1:
            raise PathSyntaxError(expression, f"unmatched '[' in segment {segment!r}")
        content = rest[1:close]
        if not _INDEX_RE.fullmatch(content):
            raise PathSyntaxError(
                expression, f"index {content!r} is not a non-negative integer"
            )
        steps.append(Index(int(content)))
        rest = rest[close + 1:]
    return steps


def resolve(tree: Any, path: Path) -> Any:
    """Return the node at ``path``, or MISSING when any step cannot be taken."""
    current = tree
    for step in path.steps:
        current = _child(current, step)
        if current is MISSING:
            return MISSING
    return current


def _child(node: Any, step: PathStep) -> Any:
    if isinstance(step, Key):
        if isinstance(node, dict):
            return node.get(step.name, MISSING)
        return MISSING
    if isinstance(node, list) and step.position < len(node):
        return node[step.position]
    return MISSING


def assign(tree: Any, path: Path, value: Any) -> None:
    """Set ``value`` at ``path`` inside ``tree``, creating intermediate nodes.

    Missing or null intermediate nodes are created as mappings for key steps
    and sequences for index steps. Sequences are padded with None up to the
    target index. Either the whole assignment happens or the tree is left
    unchanged.

    Raises:
        PathTypeConflictError: If an existing node cannot take a step.
        UnsupportedValueError: If ``value`` is not a configuration value.
    """
    value = normalize(value)
    _check_assignable(tree, path)

    node = tree
    steps = path.steps
    for step, next_step in zip(steps, steps[1:]):
        child = _child(node, step)
        if child is MISSING or child is None:
            child = {} if isinstance(next_step, Key) else []
            _put(node, step, child)
        node = child
    _put(node, steps[-1], value)


def _check_assignable(tree: Any, path: Path) -> None:
    node = tree
    for depth, step in enumerate(path.steps):
        wanted = dict if isinstance(step, Key) else list
        if not isinstance(node, wanted):
            expected = "mapping" if wanted is dict else "sequence"
            raise PathTypeConflictError(
                render_steps(path.steps[:depth]), expected, type_name(node)
            )
        node = _child(node, step)
        if node is MISSING or node is None:
            # everything below is created fresh
            return


def _put(node: Any, step: PathStep, value: Any) -> None:
    if isinstance(step, Key):
        node[step.name] = value
        return
    if step.position >= len(node):
        node.extend([None] * (step.position + 1 - len(node)))
    node[step.position] = value


class PathResolver:
    """Parses path expressions, with a bounded cache, and applies them to trees."""

    def __init__(self, cache_size: int = 256) -> None:
        self._cache_size = cache_size
        self._cache: OrderedDict[str, Path] = OrderedDict()
        self._lock = threading.Lock()

    def parse(self, expression: str) -> Path:
        with self._lock:
            cached = self._cache.get(expression)
            if cached is not None:
                self._cache.move_to_end(expression)
                return cached
        path = parse_path(expression)
        if self._cache_size > 0:
            with self._lock:
                self._cache[expression] = path
                while len(self._cache) > self._cache_size:
                    self._cache.popitem(last=False)
        return path

    def resolve(self, tree: Any, path: Path | str) -> Any:
        return resolve(tree, self._as_path(path))

    def set(self, tree: Any, path: Path | str, value: Any) -> None:
        assign(tree, self._as_path(path), value)

    def _as_path(self, path: Path | str) -> Path:
        return path if isinstance(path, Path) else self.parse(path)
