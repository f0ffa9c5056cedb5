"""Expansion of theories into executable test cases."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Sequence

from datatheory.cases import TestCase, no_data_message
from datatheory.config import DiscoveryOptions
from datatheory.data.directives import DataDirective, get_data_directives, get_theory
from datatheory.data.providers import ProviderResolver
from datatheory.diagnostics import DiagnosticSink
from datatheory.factory import DefaultTestCaseFactory, TestCaseFactory
from datatheory.method import TestMethod
from datatheory.tracing import DiscoveryTracer


logger = logging.getLogger(__name__)


class TheoryDiscoverer:
    """Turns one theory into the ordered list of test cases to register.

    The outcome is always exactly one of:

    - a single skipped case, when the theory itself is skipped;
    - a single theory case that resolves data at run time, when
      pre-enumeration is off, a provider cannot enumerate ahead of time,
      or enumeration fails;
    - a single execution error case, when enumeration yields no rows;
    - one data row case per row, in directive order.

    Examples:
        discoverer = TheoryDiscoverer(CapturingDiagnosticSink())
        method = TestMethod.from_callable(test_add)
        cases = discoverer.discover(DiscoveryOptions(), method)
    """

    def __init__(
        self,
        diagnostic_sink: DiagnosticSink,
        *,
        resolver: ProviderResolver | None = None,
        factory: TestCaseFactory | None = None,
        tracer: DiscoveryTracer | None = None,
    ) -> None:
        self.diagnostic_sink = diagnostic_sink
        self.resolver = resolver or ProviderResolver()
        self.factory = factory or DefaultTestCaseFactory(resolver=self.resolver)
        self.tracer = tracer or DiscoveryTracer()

    def discover(self, options: DiscoveryOptions, method: TestMethod) -> list[TestCase]:
        """Expand a theory using the directives declared on its function."""
        marker = get_theory(method.fn)
        return self.expand(
            options,
            method,
            get_data_directives(method.fn),
            skip_reason=marker.skip if marker else None,
        )

    def expand(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        directives: Sequence[DataDirective],
        skip_reason: str | None = None,
    ) -> list[TestCase]:
        """Expand ``method`` into test cases. Never raises, never returns empty."""
        with self.tracer.span(method) as span:
            cases = self._expand(options, method, directives, skip_reason)
            self.tracer.record(span, cases)
        return cases

    def _expand(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        directives: Sequence[DataDirective],
        skip_reason: str | None,
    ) -> list[TestCase]:
        # A skipped theory may legitimately have no data at all
        if skip_reason is not None:
            return [self.factory.create_skip(options, method, skip_reason)]

        if options.pre_enumerate_theories:
            try:
                cases = self._enumerate(options, method, directives)
            except Exception:
                self._emit(
                    f"Exception thrown during theory discovery on '{method.full_name}'; "
                    f"falling back to single test case.\n{traceback.format_exc()}"
                )
            else:
                if cases is not None:
                    return cases

        return [self.factory.create_theory(options, method, directives=directives)]

    def _enumerate(
        self,
        options: DiscoveryOptions,
        method: TestMethod,
        directives: Sequence[DataDirective],
    ) -> list[TestCase] | None:
        """Build one case per row, or None when any provider must defer."""
        results: list[TestCase] = []

        for directive in directives:
            provider = self.resolver.resolve(directive, method)
            if not provider.supports_discovery_enumeration():
                logger.debug(
                    "%s on %s does not support discovery enumeration; deferring",
                    type(directive).__name__,
                    method.full_name,
                )
                return None

            for data_row in provider.get_data():
                results.append(self.factory.create_data_row(options, method, data_row, index=len(results)))

        if not results:
            return [self.factory.create_execution_error(options, method, no_data_message(method))]

        return results

    def _emit(self, message: str) -> None:
        try:
            self.diagnostic_sink.emit(message)
        except Exception:
            logger.warning("Diagnostic sink failed to accept a message", exc_info=True)
