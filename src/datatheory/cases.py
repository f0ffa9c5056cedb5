"""Test case variants produced by theory discovery."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar
from uuid import NAMESPACE_URL, uuid5

from datatheory.data.directives import DataDirective
from datatheory.data.providers import ProviderResolver
from datatheory.errors import NoDataError
from datatheory.method import TestMethod


class TestCaseKind(Enum):
    """Which outcome of discovery a test case represents."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    SKIPPED = "skipped"
    DATA_ROW = "data_row"
    THEORY = "theory"
    EXECUTION_ERROR = "execution_error"


def make_unique_id(
    kind: TestCaseKind,
    method: TestMethod,
    arguments: tuple[Any, ...] | None = None,
    index: int | None = None,
) -> str:
    """Deterministic identifier for a case of ``method``.

    ``index`` is the row position, so repeated identical rows stay distinct.
    """
    key = f"{kind.value}:{method.full_name}"
    if index is not None:
        key = f"{key}#{index}"
    if arguments is not None:
        key = f"{key}:{arguments!r}"
    return str(uuid5(NAMESPACE_URL, f"datatheory:{key}"))


def no_data_message(method: TestMethod) -> str:
    return f"No data found for {method.type_name}.{method.method_name}"


@dataclass(frozen=True)
class TestCase:
    """A discovered, executable test case."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    kind: ClassVar[TestCaseKind]

    method: TestMethod
    display_name: str
    unique_id: str


@dataclass(frozen=True)
class SkippedTestCase(TestCase):
    """The whole theory is skipped; no data is attached."""

    kind: ClassVar[TestCaseKind] = TestCaseKind.SKIPPED

    skip_reason: str


@dataclass(frozen=True)
class DataRowTestCase(TestCase):
    """One pre-enumerated row of theory data."""

    kind: ClassVar[TestCaseKind] = TestCaseKind.DATA_ROW

    arguments: tuple[Any, ...]


@dataclass(frozen=True)
class TheoryTestCase(TestCase):
    """The whole theory as one case that resolves its data when it runs."""

    kind: ClassVar[TestCaseKind] = TestCaseKind.THEORY

    directives: tuple[DataDirective, ...] = ()
    resolver: ProviderResolver = field(default_factory=ProviderResolver, compare=False, repr=False)

    def iter_data_rows(self) -> Iterator[tuple[Any, ...]]:
        """Resolve every directive again and yield its rows.

        Enumeration support is ignored here: the test is running, so rows
        that need run time context are available now.
        """
        for directive in self.directives:
            provider = self.resolver.resolve(directive, self.method)
            yield from provider.get_data()

    def resolve_data_rows(self) -> list[tuple[Any, ...]]:
        """Return all rows, raising NoDataError when there are none."""
        rows = list(self.iter_data_rows())
        if not rows:
            raise NoDataError(no_data_message(self.method))
        return rows


@dataclass(frozen=True)
class ExecutionErrorTestCase(TestCase):
    """Discovery could not find usable data; running it reports the error."""

    kind: ClassVar[TestCaseKind] = TestCaseKind.EXECUTION_ERROR

    error_message: str
