"""Test case factory used by the discoverer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from datatheory.cases import (
    DataRowTestCase,
    ExecutionErrorTestCase,
    SkippedTestCase,
    TestCase,
    TestCaseKind,
    TheoryTestCase,
    make_unique_id,
)
from datatheory.config import DiscoveryOptions
from datatheory.data.directives import DataDirective, get_data_directives, get_theory
from datatheory.data.providers import ProviderResolver
from datatheory.method import TestMethod, format_display_name


class TestCaseFactory(Protocol):
    """Creates the four test case variants."""

    def create_skip(self, options: DiscoveryOptions, method: TestMethod, skip_reason: str) -> TestCase:
        """Build a case for a skipped theory."""
        ...

    def create_data_row(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        data_row: Sequence[Any],
        *,
        index: int = 0,
    ) -> TestCase:
        """Build a case bound to one row of data; ``index`` is its position among all rows."""
        ...

    def create_theory(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        *,
        directives: Sequence[DataDirective] | None = None,
    ) -> TestCase:
        """Build a single case that resolves ``directives`` (default: those declared) at run time."""
        ...

    def create_execution_error(self, options: DiscoveryOptions, method: TestMethod, error_message: str) -> TestCase:
        """Build a case that reports a discovery error when run."""
        ...


@dataclass
class DefaultTestCaseFactory:
    """Builds the standard case types with a shared provider resolver."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    resolver: ProviderResolver = field(default_factory=ProviderResolver)

    def _display_name(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        arguments: Sequence[Any] | None = None,
    ) -> str:
        marker = get_theory(method.fn)
        return format_display_name(
            method,
            arguments,
            options.method_display,
            base_name=marker.display_name if marker else None,
        )

    def create_skip(self, options: DiscoveryOptions, method: TestMethod, skip_reason: str) -> SkippedTestCase:
        return SkippedTestCase(
            method=method,
            display_name=self._display_name(options, method),
            unique_id=make_unique_id(TestCaseKind.SKIPPED, method),
            skip_reason=skip_reason,
        )

    def create_data_row(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        data_row: Sequence[Any],
        *,
        index: int = 0,
    ) -> DataRowTestCase:
        arguments = tuple(data_row)
        return DataRowTestCase(
            method=method,
            display_name=self._display_name(options, method, arguments),
            unique_id=make_unique_id(TestCaseKind.DATA_ROW, method, arguments, index),
            arguments=arguments,
        )

    def create_theory(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        *,
        directives: Sequence[DataDirective] | None = None,
    ) -> TheoryTestCase:
        if directives is None:
            directives = get_data_directives(method.fn)
        return TheoryTestCase(
            method=method,
            display_name=self._display_name(options, method),
            unique_id=make_unique_id(TestCaseKind.THEORY, method),
            directives=tuple(directives),
            resolver=self.resolver,
        )

    def create_execution_error(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        error_message: str,
    ) -> ExecutionErrorTestCase:
        return ExecutionErrorTestCase(
            method=method,
            display_name=self._display_name(options, method),
            unique_id=make_unique_id(TestCaseKind.EXECUTION_ERROR, method),
            error_message=error_message,
        )
