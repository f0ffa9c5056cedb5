"""Test method metadata and display names."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from datatheory.config import MethodDisplay


MAX_ARGUMENT_LENGTH = 50


@dataclass(frozen=True)
class TestMethod:
    """A declared theory: owning type, method name and formal parameters."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    type_name: str
    method_name: str
    parameters: tuple[str, ...]
    fn: Callable[..., Any] = field(compare=False, repr=False)
    owner: type | None = field(default=None, compare=False, repr=False)

    @property
    def full_name(self) -> str:
        """Qualified name used in messages."""
        return f"{self.type_name}.{self.method_name}"

    @classmethod
    def from_callable(cls, fn: Callable[..., Any], owner: type | None = None) -> TestMethod:
        """Build metadata for a module-level function or a method of ``owner``."""
        if owner is not None:
            type_name = owner.__name__
        else:
            type_name = getattr(fn, "__module__", "__main__").rsplit(".", 1)[-1]
        return cls(
            type_name=type_name,
            method_name=fn.__name__,
            parameters=_extract_parameters(fn),
            fn=fn,
            owner=owner,
        )


def _extract_parameters(fn: Callable[..., Any]) -> tuple[str, ...]:
    """Extract parameter names from function signature (excluding 'self' and 'cls')."""
    sig = inspect.signature(fn)
    return tuple(p for p in sig.parameters if p not in {"self", "cls"})


def _format_value(value: Any) -> str:
    text = repr(value)
    if len(text) > MAX_ARGUMENT_LENGTH:
        return text[: MAX_ARGUMENT_LENGTH - 3] + "..."
    return text


def format_display_name(
    method: TestMethod,
    arguments: Sequence[Any] | None = None,
    method_display: MethodDisplay = MethodDisplay.CLASS_AND_METHOD,
    base_name: str | None = None,
) -> str:
    """Render the display name of a test case.

    Examples:
    --------
    >>> format_display_name(method, (1, "a"))
    "MathTests.test_add(x=1, y='a')"
    """
    if base_name is None:
        if method_display is MethodDisplay.METHOD:
            base_name = method.method_name
        else:
            base_name = method.full_name
    if arguments is None:
        return base_name

    formatted = []
    for idx, value in enumerate(arguments):
        name = method.parameters[idx] if idx < len(method.parameters) else f"arg{idx}"
        formatted.append(f"{name}={_format_value(value)}")
    return f"{base_name}({', '.join(formatted)})"
