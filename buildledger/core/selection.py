"""Name selection: resolve an optional selection against the known target names.

A resolution has exactly two shapes:

- ``Unrestricted``: no selection was given, every row passes.
- ``Explicit(names)``: an ordered, possibly empty, tuple of names.

An explicit selection that matches nothing is ``Explicit(())`` and must never
be confused with ``Unrestricted``.

Selectors are pluggable: any object with ``resolve(universe) -> Restriction``
satisfies the ``Selector`` protocol.  The built-in helpers mirror the usual
tidyselect vocabulary (``everything``, ``all_of``, ``starts_with``,
``ends_with``, ``contains``, ``matches``) and can be combined with ``|``.
Unknown literal names are dropped silently.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Literal, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict


class SelectionError(ValueError):
    """Raised for a selection that is neither a selector nor a name collection."""


# ---------------------------------------------------------------------------
# Restriction: the two-valued resolution result
# ---------------------------------------------------------------------------


class Unrestricted(BaseModel):
    """Every name is eligible."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unrestricted"] = "unrestricted"


class Explicit(BaseModel):
    """Only the listed names are eligible, in this order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit"] = "explicit"
    names: tuple[str, ...] = ()


Restriction = Union[Unrestricted, Explicit]


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


@runtime_checkable
class Selector(Protocol):
    """Protocol for name-selection expressions."""

    def resolve(self, universe: Sequence[str]) -> Restriction:
        """Evaluate against the full set of names currently in the store."""
        ...


class BaseSelector:
    """Shared behaviour for the built-in selectors."""

    def resolve(self, universe: Sequence[str]) -> Explicit:
        return Explicit(names=tuple(self._select(universe)))

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        raise NotImplementedError

    def __or__(self, other: BaseSelector) -> UnionSelector:
        if not isinstance(other, BaseSelector):
            return NotImplemented
        return UnionSelector(self, other)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__, repr(self)))


class Everything(BaseSelector):
    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        return universe

    def __repr__(self) -> str:
        return "everything()"


class AllOf(BaseSelector):
    """Literal names, kept in the order given, restricted to known names."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(dict.fromkeys(names))

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        known = set(universe)
        return [name for name in self.names if name in known]

    def __repr__(self) -> str:
        return f"all_of({list(self.names)!r})"


class StartsWith(BaseSelector):
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        return [name for name in universe if name.startswith(self.prefix)]

    def __repr__(self) -> str:
        return f"starts_with({self.prefix!r})"


class EndsWith(BaseSelector):
    def __init__(self, suffix: str) -> None:
        self.suffix = suffix

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        return [name for name in universe if name.endswith(self.suffix)]

    def __repr__(self) -> str:
        return f"ends_with({self.suffix!r})"


class Contains(BaseSelector):
    def __init__(self, text: str) -> None:
        self.text = text

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        return [name for name in universe if self.text in name]

    def __repr__(self) -> str:
        return f"contains({self.text!r})"


class Matches(BaseSelector):
    """Names where the regular expression is found (``re.search``)."""

    def __init__(self, pattern: str) -> None:
        try:
            self._regex = re.compile(pattern)
        except re.error as exc:
            raise SelectionError(f"Invalid pattern {pattern!r}: {exc}") from exc
        self.pattern = pattern

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        return [name for name in universe if self._regex.search(name)]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Matches) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(("matches", self.pattern))

    def __repr__(self) -> str:
        return f"matches({self.pattern!r})"


class UnionSelector(BaseSelector):
    """Names of each part in turn, first occurrence wins."""

    def __init__(self, *parts: BaseSelector) -> None:
        self.parts = parts

    def _select(self, universe: Sequence[str]) -> Iterable[str]:
        selected: dict[str, None] = {}
        for part in self.parts:
            selected.update(dict.fromkeys(part._select(universe)))
        return list(selected)

    def __repr__(self) -> str:
        return " | ".join(repr(part) for part in self.parts)


def everything() -> Everything:
    return Everything()


def all_of(names: Iterable[str]) -> AllOf:
    if isinstance(names, str):
        names = [names]
    return AllOf(names)


def starts_with(prefix: str) -> StartsWith:
    return StartsWith(prefix)


def ends_with(suffix: str) -> EndsWith:
    return EndsWith(suffix)


def contains(text: str) -> Contains:
    return Contains(text)


def matches(pattern: str) -> Matches:
    return Matches(pattern)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


NameSelection = Union[Selector, Iterable[str], str, None]


def resolve_names(selection: NameSelection, universe: Sequence[str]) -> Restriction:
    """Resolve *selection* against the store's full name *universe*.

    ``None`` gives ``Unrestricted``.  A selector is evaluated directly; a
    string or an iterable of strings is treated as ``all_of``.
    """
    if selection is None:
        return Unrestricted()
    if isinstance(selection, Selector):
        return selection.resolve(universe)
    if isinstance(selection, str):
        return all_of([selection]).resolve(universe)
    if isinstance(selection, Iterable):
        names = list(selection)
        bad = [name for name in names if not isinstance(name, str)]
        if bad:
            raise SelectionError(f"Target names must be strings, got {bad!r}")
        return all_of(names).resolve(universe)
    raise SelectionError(
        f"Unsupported name selection of type {type(selection).__name__}: "
        f"expected a selector, a name, or a collection of names."
    )


# ---------------------------------------------------------------------------
# Text form (CLI)
# ---------------------------------------------------------------------------

_CALL_RE = re.compile(r"^(?P<helper>[A-Za-z_]+)\((?P<arg>.*)\)$", re.DOTALL)

_SINGLE_ARG_HELPERS = {
    "starts_with": starts_with,
    "ends_with": ends_with,
    "contains": contains,
    "matches": matches,
}


def parse_selector(text: str) -> BaseSelector:
    """Parse the text form of a selection.

    Examples: ``x,y``, ``starts_with(y_)``, ``matches(^fit_[0-9]+$)``,
    ``all_of(a, b) | ends_with(_summary)``.  Helper arguments may be quoted.
    """
    parts = [_parse_term(term) for term in _split_top_level(text)]
    if len(parts) == 1:
        return parts[0]
    return UnionSelector(*parts)


def _split_top_level(text: str) -> list[str]:
    terms: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise SelectionError(f"Unbalanced parentheses in {text!r}")
        if char == "|" and depth == 0:
            terms.append("".join(current))
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise SelectionError(f"Unbalanced parentheses in {text!r}")
    terms.append("".join(current))
    stripped = [term.strip() for term in terms]
    if not all(stripped):
        raise SelectionError(f"Empty selection term in {text!r}")
    return stripped


def _parse_term(term: str) -> BaseSelector:
    call = _CALL_RE.match(term)
    if call is None:
        if "(" in term or ")" in term:
            raise SelectionError(f"Malformed selection term {term!r}")
        return all_of(_split_names(term))

    helper, arg = call.group("helper"), call.group("arg").strip()
    if helper == "everything":
        if arg:
            raise SelectionError("everything() takes no argument")
        return everything()
    if helper in ("all_of", "any_of"):
        return all_of(_split_names(arg))
    if helper in _SINGLE_ARG_HELPERS:
        value = _unquote(arg)
        if not value:
            raise SelectionError(f"{helper}() needs a non-empty argument")
        return _SINGLE_ARG_HELPERS[helper](value)
    raise SelectionError(f"Unknown selection helper {helper!r}")


def _split_names(text: str) -> list[str]:
    names = [_unquote(name.strip()) for name in text.split(",")]
    if not all(names):
        raise SelectionError(f"Empty target name in {text!r}")
    return names


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value
