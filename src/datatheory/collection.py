"""Collect theories from test modules and expand them."""

import importlib.util
import inspect
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any

from datatheory.cases import TestCase
from datatheory.config import DiscoveryOptions
from datatheory.data.directives import get_theory
from datatheory.diagnostics import default_diagnostic_sink
from datatheory.discoverer import TheoryDiscoverer
from datatheory.method import TestMethod
from datatheory.tracing import DiscoveryTracer


def _load_module(path: Path) -> ModuleType:
    """Dynamically load a Python module from path."""
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load module from {path}"
        raise ImportError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[path.stem] = module
    spec.loader.exec_module(module)
    return module


def _defined_in(obj: Any, module: ModuleType) -> bool:
    return getattr(obj, "__module__", None) == module.__name__


def _definition_line(obj: Callable[..., Any]) -> int:
    code = getattr(obj, "__code__", None)
    return code.co_firstlineno if code else 0


def find_theories(module: ModuleType) -> list[TestMethod]:
    """Find theory functions and theory methods defined in a module, in source order."""
    found: list[tuple[int, TestMethod]] = []

    for _, obj in inspect.getmembers(module):
        if inspect.isfunction(obj) and _defined_in(obj, module):
            if get_theory(obj) is not None:
                found.append((_definition_line(obj), TestMethod.from_callable(obj)))

        elif inspect.isclass(obj) and _defined_in(obj, module):
            for _, method in inspect.getmembers(obj, predicate=inspect.isfunction):
                if get_theory(method) is not None:
                    found.append((_definition_line(method), TestMethod.from_callable(method, owner=obj)))

    found.sort(key=lambda entry: entry[0])
    return [method for _, method in found]


def collect_module(
    module: ModuleType,
    *,
    options: DiscoveryOptions | None = None,
    discoverer: TheoryDiscoverer | None = None,
) -> list[TestCase]:
    """Expand every theory of an imported module."""
    options = options or DiscoveryOptions()
    discoverer = discoverer or TheoryDiscoverer(
        default_diagnostic_sink(options),
        tracer=DiscoveryTracer.from_options(options),
    )

    cases: list[TestCase] = []
    for method in find_theories(module):
        cases.extend(discoverer.discover(options, method))
    return cases


def collect(
    path: Path | str | None = None,
    *,
    options: DiscoveryOptions | None = None,
    discoverer: TheoryDiscoverer | None = None,
    pattern: str = "test_*.py",
) -> list[TestCase]:
    """Discover and expand all theories from path.

    Args:
        path: File or directory to search. Defaults to current directory.
        options: Discovery options. Defaults to values from the environment.
        discoverer: Discoverer to use. Defaults to one built from ``options``.
        pattern: Glob for test files when ``path`` is a directory.

    Returns:
        Expanded TestCase objects, file by file in definition order.

    Example:
        cases = collect()  # Current directory
        cases = collect("test_math.py")  # Specific file
        cases = collect("./tests/", options=DiscoveryOptions(pre_enumerate_theories=False))
    """
    if path is None:
        path = Path.cwd()
    elif isinstance(path, str):
        path = Path(path)

    path = path.resolve()
    options = options or DiscoveryOptions()
    discoverer = discoverer or TheoryDiscoverer(
        default_diagnostic_sink(options),
        tracer=DiscoveryTracer.from_options(options),
    )

    if path.is_file():
        files = [path] if path.suffix == ".py" else []
    elif path.is_dir():
        files = sorted(path.rglob(pattern))
    else:
        files = []

    cases: list[TestCase] = []
    for file_path in files:
        module = _load_module(file_path)
        cases.extend(collect_module(module, options=options, discoverer=discoverer))
    return cases
