"""Data providers and the resolver that maps directives to them.

Every directive kind resolves to a provider with the same two operations:
whether its rows may be enumerated at discovery time, and the rows themselves.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Protocol, TypeVar

from datatheory.data.directives import ClassData, DataDirective, FileData, InlineData, MemberData
from datatheory.data.files import load_rows
from datatheory.errors import DataProviderError, DataRowError, ProviderResolutionError
from datatheory.method import TestMethod


class DataProvider(Protocol):
    """Enumerates (or declines to enumerate) the rows of one directive."""

    def supports_discovery_enumeration(self) -> bool:
        """Whether rows may be produced before any test runs."""
        ...

    def get_data(self) -> Iterable[tuple[Any, ...]]:
        """Produce the data rows in order."""
        ...


ProviderFactory = Callable[[Any, TestMethod], DataProvider]
P = TypeVar("P")

_registry: dict[type[DataDirective], ProviderFactory] = {}


def provider_for(directive_type: type[DataDirective]) -> Callable[[P], P]:
    """Register a provider class as the default for ``directive_type``."""

    def decorator(provider_type: P) -> P:
        _registry[directive_type] = provider_type  # type: ignore[assignment]
        return provider_type

    return decorator


def get_registry() -> dict[type[DataDirective], ProviderFactory]:
    """Get a copy of the default provider registry."""
    return dict(_registry)


def normalize_row(raw: Any, method: TestMethod) -> tuple[Any, ...]:
    """Turn a raw row into an argument tuple for ``method``."""
    if isinstance(raw, tuple):
        return raw
    if isinstance(raw, list):
        return tuple(raw)
    if isinstance(raw, Mapping):
        missing = [name for name in method.parameters if name not in raw]
        if missing:
            msg = f"Row for {method.full_name} is missing values for {', '.join(missing)}"
            raise DataRowError(msg)
        return tuple(raw[name] for name in method.parameters)
    if len(method.parameters) == 1:
        return (raw,)
    msg = (
        f"Row for {method.full_name} must be a tuple or list, "
        f"got {type(raw).__name__}"
    )
    raise DataRowError(msg)


@provider_for(InlineData)
class InlineDataProvider:
    """Provides the single literal row of an @inline_data directive."""

    def __init__(self, directive: InlineData, method: TestMethod) -> None:
        self.directive = directive
        self.method = method

    def supports_discovery_enumeration(self) -> bool:
        return True

    def get_data(self) -> Iterator[tuple[Any, ...]]:
        yield self.directive.values


@provider_for(MemberData)
class MemberDataProvider:
    """Provides rows from a named attribute or function.

    Lookup order: ``member_type``, the class owning the test method, then the
    globals of the module defining the test function.
    """

    def __init__(self, directive: MemberData, method: TestMethod) -> None:
        self.directive = directive
        self.method = method

    def supports_discovery_enumeration(self) -> bool:
        return not self.directive.disable_discovery_enumeration

    def _lookup(self) -> tuple[Any, str]:
        name = self.directive.name
        searched: list[str] = []
        for source in (self.directive.member_type, self.method.owner):
            if source is None:
                continue
            if hasattr(source, name):
                return getattr(source, name), source.__name__
            searched.append(source.__name__)

        module_globals = getattr(self.method.fn, "__globals__", {})
        module_name = module_globals.get("__name__", self.method.type_name).rsplit(".", 1)[-1]
        if name in module_globals:
            return module_globals[name], module_name
        searched.append(f"module {module_name}")
        msg = f"Could not find member '{name}' on {', '.join(searched)}"
        raise DataProviderError(msg)

    def _realize(self) -> Any:
        member, source_name = self._lookup()
        if callable(member):
            value = member(*self.directive.arguments)
        elif self.directive.arguments:
            msg = f"Member '{self.directive.name}' on {source_name} is not callable but arguments were given"
            raise DataProviderError(msg)
        else:
            value = member

        if value is None:
            msg = f"Member '{self.directive.name}' on {source_name} returned no data"
            raise DataProviderError(msg)
        return value

    def get_data(self) -> Iterator[tuple[Any, ...]]:
        for raw in self._realize():
            yield normalize_row(raw, self.method)


@provider_for(ClassData)
class ClassDataProvider:
    """Provides rows by iterating a fresh instance of the source class."""

    def __init__(self, directive: ClassData, method: TestMethod) -> None:
        self.directive = directive
        self.method = method

    def supports_discovery_enumeration(self) -> bool:
        return not self.directive.disable_discovery_enumeration

    def get_data(self) -> Iterator[tuple[Any, ...]]:
        source = self.directive.source_class()
        if not isinstance(source, Iterable):
            msg = f"{self.directive.source_class.__name__} is not iterable"
            raise DataProviderError(msg)
        for raw in source:
            yield normalize_row(raw, self.method)


@provider_for(FileData)
class FileDataProvider:
    """Provides rows read from a CSV, JSON Lines or YAML file."""

    def __init__(self, directive: FileData, method: TestMethod) -> None:
        self.directive = directive
        self.method = method

    def supports_discovery_enumeration(self) -> bool:
        return True

    def get_data(self) -> Iterator[tuple[Any, ...]]:
        if not self.directive.path.is_file():
            msg = f"Data file not found: {self.directive.path}"
            raise DataProviderError(msg)
        for raw in load_rows(self.directive.path, self.directive.format):
            yield normalize_row(raw, self.method)


class ProviderResolver:
    """Maps data directives to the providers that enumerate them."""

    def __init__(self, registry: dict[type[DataDirective], ProviderFactory] | None = None) -> None:
        self.registry = get_registry() if registry is None else dict(registry)

    def register(self, directive_type: type[DataDirective], provider_type: ProviderFactory) -> None:
        """Use ``provider_type`` for directives of ``directive_type``."""
        self.registry[directive_type] = provider_type

    def resolve(self, directive: DataDirective, method: TestMethod) -> DataProvider:
        """Build the provider for ``directive`` on ``method``."""
        for directive_type in type(directive).__mro__:
            factory = self.registry.get(directive_type)
            if factory is not None:
                return factory(directive, method)
        msg = f"No data provider registered for {type(directive).__name__} on {method.full_name}"
        raise ProviderResolutionError(msg)
