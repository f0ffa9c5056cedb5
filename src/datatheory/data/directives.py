"""Decorators that declare theories and their data sources."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal


FileFormat = Literal["csv", "jsonl", "yaml"]

_SUFFIX_FORMATS: dict[str, FileFormat] = {
    ".csv": "csv",
    ".jsonl": "jsonl",
    ".yaml": "yaml",
    ".yml": "yaml",
}


@dataclass(frozen=True)
class TheoryMarker:
    """Definition of a @theory decorator."""

    skip: str | None = None
    display_name: str | None = None


@dataclass(frozen=True)
class DataDirective:
    """Base class for a declared source of data rows."""


@dataclass(frozen=True)
class InlineData(DataDirective):
    """A single row of literal values."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class MemberData(DataDirective):
    """Rows produced by an attribute or function."""

    name: str
    arguments: tuple[Any, ...] = ()
    member_type: type | None = None
    disable_discovery_enumeration: bool = False


@dataclass(frozen=True)
class ClassData(DataDirective):
    """Rows produced by iterating a fresh instance of a class."""

    source_class: type
    disable_discovery_enumeration: bool = False


@dataclass(frozen=True)
class FileData(DataDirective):
    """Rows read from a CSV, JSON Lines or YAML file."""

    path: Path
    format: FileFormat


def _record(fn: Callable[..., Any], directive: DataDirective) -> Callable[..., Any]:
    # Decorators apply bottom-up; prepend to keep source order.
    # functools.wraps copies __dict__, so never mutate the list in place.
    directives: list[DataDirective] = [directive, *getattr(fn, "__datatheory_data__", [])]
    fn.__datatheory_data__ = directives
    return fn


def theory(
    fn: Callable[..., Any] | None = None,
    *,
    skip: str | None = None,
    display_name: str | None = None,
) -> Callable[..., Any]:
    """Mark a function or method as a theory.

    Examples:
    --------
    >>> @theory
    ... @inline_data(1, 2, 3)
    ... def test_add(a, b, total): ...

    >>> @theory(skip="flaky upstream")
    ... @member_data("CASES")
    ... def test_lookup(key, expected): ...
    """
    marker = TheoryMarker(skip=skip, display_name=display_name)

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        fn.__datatheory_theory__ = marker
        return fn

    if fn is not None:
        return decorator(fn)
    return decorator


def inline_data(*values: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Supply one row of literal argument values."""
    directive = InlineData(values=tuple(values))
    return lambda fn: _record(fn, directive)


def member_data(
    name: str,
    *arguments: Any,
    member_type: type | None = None,
    disable_discovery_enumeration: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Supply rows from a member of ``member_type``, the test class or the module.

    A callable member is invoked with ``arguments``. Set
    ``disable_discovery_enumeration`` when the rows can only be built at run time.
    """
    if not name:
        msg = "member_data() requires a member name"
        raise ValueError(msg)
    directive = MemberData(
        name=name,
        arguments=tuple(arguments),
        member_type=member_type,
        disable_discovery_enumeration=disable_discovery_enumeration,
    )
    return lambda fn: _record(fn, directive)


def class_data(
    source_class: type,
    *,
    disable_discovery_enumeration: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Supply rows by iterating an instance of ``source_class``."""
    if not isinstance(source_class, type):
        msg = f"class_data() expects a class, got {type(source_class).__name__}"
        raise TypeError(msg)
    directive = ClassData(
        source_class=source_class,
        disable_discovery_enumeration=disable_discovery_enumeration,
    )
    return lambda fn: _record(fn, directive)


def file_data(
    path: str | Path,
    *,
    format: FileFormat | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Supply rows from a data file.

    Relative paths are resolved against the directory of the defining module.
    """
    path = Path(path)
    resolved_format = format or _SUFFIX_FORMATS.get(path.suffix.lower())
    if resolved_format not in {"csv", "jsonl", "yaml"}:
        msg = f"file_data() cannot infer a format for '{path}'; pass format="
        raise ValueError(msg)

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        full_path = path
        if not full_path.is_absolute():
            module_file = getattr(fn, "__globals__", {}).get("__file__")
            if module_file:
                full_path = Path(module_file).parent / full_path
        return _record(fn, FileData(path=full_path, format=resolved_format))

    return decorator


def get_theory(fn: Callable[..., Any]) -> TheoryMarker | None:
    """Return the theory marker of a callable, if any."""
    return getattr(fn, "__datatheory_theory__", None)


def get_data_directives(fn: Callable[..., Any]) -> list[DataDirective]:
    """Return the data directives of a callable in declaration order."""
    return list(getattr(fn, "__datatheory_data__", []))
