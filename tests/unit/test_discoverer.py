"""Tests for theory expansion."""

from dataclasses import dataclass
from typing import Any

import pytest

from datatheory import (
    CapturingDiagnosticSink,
    DataRowTestCase,
    DiscoveryOptions,
    ExecutionErrorTestCase,
    ProviderResolver,
    SkippedTestCase,
    TestCaseKind,
    TestMethod,
    TheoryDiscoverer,
    TheoryTestCase,
    inline_data,
    member_data,
    theory,
)
from datatheory.data.directives import DataDirective, InlineData, MemberData


@dataclass(frozen=True)
class StubData(DataDirective):
    rows: tuple[Any, ...] = ()
    enumerable: bool = True
    error: Exception | None = None


class StubProvider:
    def __init__(self, directive: StubData, method: TestMethod) -> None:
        self.directive = directive

    def supports_discovery_enumeration(self) -> bool:
        return self.directive.enumerable

    def get_data(self):
        yield from self.directive.rows
        if self.directive.error is not None:
            raise self.directive.error


@dataclass(frozen=True)
class UnregisteredData(DataDirective):
    pass


class MathTheories:
    def check_add(self, a, b, total):
        assert a + b == total


METHOD = TestMethod.from_callable(MathTheories.check_add, owner=MathTheories)
ENABLED = DiscoveryOptions(pre_enumerate_theories=True)
DISABLED = DiscoveryOptions(pre_enumerate_theories=False)


@pytest.fixture
def sink():
    return CapturingDiagnosticSink()


@pytest.fixture
def discoverer(sink):
    resolver = ProviderResolver()
    resolver.register(StubData, StubProvider)
    return TheoryDiscoverer(sink, resolver=resolver)


def kinds(cases):
    return [case.kind for case in cases]


class TestSkip:
    def test_skip_returns_single_skipped_case(self, discoverer):
        cases = discoverer.expand(ENABLED, METHOD, [StubData(rows=((1, 2, 3),))], skip_reason="not ready")

        assert len(cases) == 1
        assert isinstance(cases[0], SkippedTestCase)
        assert cases[0].skip_reason == "not ready"

    def test_skip_ignores_broken_and_empty_providers(self, discoverer, sink):
        directives = [UnregisteredData(), StubData(error=RuntimeError("boom")), StubData()]

        cases = discoverer.expand(ENABLED, METHOD, directives, skip_reason="later")

        assert kinds(cases) == [TestCaseKind.SKIPPED]
        assert sink.messages == []

    def test_skip_wins_over_disabled_pre_enumeration(self, discoverer):
        cases = discoverer.expand(DISABLED, METHOD, [], skip_reason="later")

        assert kinds(cases) == [TestCaseKind.SKIPPED]

    def test_empty_skip_reason_still_skips(self, discoverer):
        cases = discoverer.expand(ENABLED, METHOD, [StubData(rows=((1, 2, 3),))], skip_reason="")

        assert kinds(cases) == [TestCaseKind.SKIPPED]


class TestPreEnumerationDisabled:
    def test_returns_single_theory_case(self, discoverer):
        cases = discoverer.expand(DISABLED, METHOD, [StubData(rows=((1, 2, 3), (2, 2, 4)))])

        assert len(cases) == 1
        assert isinstance(cases[0], TheoryTestCase)

    def test_providers_are_not_consulted(self, discoverer, sink):
        cases = discoverer.expand(DISABLED, METHOD, [UnregisteredData()])

        assert kinds(cases) == [TestCaseKind.THEORY]
        assert sink.messages == []


class TestEnumeration:
    def test_one_case_per_row_in_order(self, discoverer):
        rows = ((1, 1, 2), (2, 3, 5), (4, 4, 8))

        cases = discoverer.expand(ENABLED, METHOD, [StubData(rows=rows)])

        assert all(isinstance(case, DataRowTestCase) for case in cases)
        assert [case.arguments for case in cases] == list(rows)

    def test_rows_follow_directive_declaration_order(self, discoverer):
        directives = [StubData(rows=((1, 1, 2),)), StubData(rows=((2, 2, 4), (3, 3, 6)))]

        cases = discoverer.expand(ENABLED, METHOD, directives)

        assert [case.arguments for case in cases] == [(1, 1, 2), (2, 2, 4), (3, 3, 6)]

    def test_empty_provider_contributes_nothing(self, discoverer):
        directives = [StubData(), StubData(rows=((1, 1, 2),))]

        cases = discoverer.expand(ENABLED, METHOD, directives)

        assert [case.arguments for case in cases] == [(1, 1, 2)]

    def test_non_enumerable_provider_discards_earlier_rows(self, discoverer, sink):
        directives = [StubData(rows=((1, 1, 2),)), StubData(enumerable=False)]

        cases = discoverer.expand(ENABLED, METHOD, directives)

        assert len(cases) == 1
        assert isinstance(cases[0], TheoryTestCase)
        assert sink.messages == []

    def test_zero_rows_returns_execution_error(self, discoverer):
        cases = discoverer.expand(ENABLED, METHOD, [StubData()])

        assert len(cases) == 1
        assert isinstance(cases[0], ExecutionErrorTestCase)
        assert cases[0].error_message == "No data found for MathTheories.check_add"

    def test_no_directives_returns_execution_error(self, discoverer):
        cases = discoverer.expand(ENABLED, METHOD, [])

        assert kinds(cases) == [TestCaseKind.EXECUTION_ERROR]

    def test_identical_rows_get_distinct_ids(self, discoverer):
        directives = [InlineData(values=(1, 1, 2)), InlineData(values=(1, 1, 2))]

        first = discoverer.expand(ENABLED, METHOD, directives)
        second = discoverer.expand(ENABLED, METHOD, directives)

        assert [c.arguments for c in first] == [(1, 1, 2), (1, 1, 2)]
        assert first[0].unique_id != first[1].unique_id
        assert [c.unique_id for c in first] == [c.unique_id for c in second]

    def test_expansion_is_repeatable(self, discoverer):
        directives = [StubData(rows=((1, 1, 2), (2, 2, 4)))]

        first = discoverer.expand(ENABLED, METHOD, directives)
        second = discoverer.expand(ENABLED, METHOD, directives)

        assert first == second
        assert [c.unique_id for c in first] == [c.unique_id for c in second]


class TestDeferredDirectives:
    def test_theory_case_keeps_directives_given_to_expand(self, sink):
        discoverer = TheoryDiscoverer(sink)

        cases = discoverer.expand(DISABLED, METHOD, [InlineData(values=(1, 1, 2))])

        assert kinds(cases) == [TestCaseKind.THEORY]
        assert cases[0].directives == (InlineData(values=(1, 1, 2)),)
        assert cases[0].resolve_data_rows() == [(1, 1, 2)]

    def test_non_enumerable_fallback_keeps_directives(self, discoverer):
        directives = [InlineData(values=(1, 1, 2)), StubData(rows=((2, 2, 4),), enumerable=False)]

        cases = discoverer.expand(ENABLED, METHOD, directives)

        assert kinds(cases) == [TestCaseKind.THEORY]
        assert cases[0].resolve_data_rows() == [(1, 1, 2), (2, 2, 4)]

    def test_substituted_factory_receives_directives(self, sink):
        received = []

        class DirectiveFactory:
            def create_theory(self, options, method, *, directives=None):
                received.append(tuple(directives))
                return "theory"

        discoverer = TheoryDiscoverer(sink, factory=DirectiveFactory())

        assert discoverer.expand(DISABLED, METHOD, [MemberData(name="ROWS")]) == ["theory"]
        assert received == [(MemberData(name="ROWS"),)]


class TestFailureFallback:
    def test_enumeration_failure_defers_and_reports(self, discoverer, sink):
        directives = [StubData(rows=((1, 1, 2),), error=RuntimeError("generator exploded"))]

        cases = discoverer.expand(ENABLED, METHOD, directives)

        assert kinds(cases) == [TestCaseKind.THEORY]
        assert len(sink.messages) == 1
        assert "MathTheories.check_add" in sink.messages[0]
        assert "generator exploded" in sink.messages[0]

    def test_resolution_failure_defers_and_reports(self, discoverer, sink):
        cases = discoverer.expand(ENABLED, METHOD, [StubData(rows=((1, 1, 2),)), UnregisteredData()])

        assert kinds(cases) == [TestCaseKind.THEORY]
        assert len(sink.messages) == 1
        assert "ProviderResolutionError" in sink.messages[0]

    def test_failing_sink_does_not_change_result(self):
        class BrokenSink:
            def emit(self, message):
                raise OSError("sink closed")

        resolver = ProviderResolver()
        resolver.register(StubData, StubProvider)
        discoverer = TheoryDiscoverer(BrokenSink(), resolver=resolver)

        cases = discoverer.expand(ENABLED, METHOD, [StubData(error=ValueError("bad"))])

        assert kinds(cases) == [TestCaseKind.THEORY]

    def test_base_exceptions_propagate(self, discoverer):
        with pytest.raises(KeyboardInterrupt):
            discoverer.expand(ENABLED, METHOD, [StubData(error=KeyboardInterrupt())])


ROWS = [(2, 3, 5), (10, -4, 6)]


@theory
@inline_data(1, 1, 2)
@member_data("ROWS")
def check_sum(a, b, total):
    assert a + b == total


@theory(skip="waiting on upstream fix")
@member_data("MISSING")
def check_skipped(a, b, total):
    pass


class TestDiscover:
    def test_reads_declared_directives(self, sink):
        discoverer = TheoryDiscoverer(sink)

        cases = discoverer.discover(ENABLED, TestMethod.from_callable(check_sum))

        assert [case.arguments for case in cases] == [(1, 1, 2), (2, 3, 5), (10, -4, 6)]
        assert cases[0].display_name == "test_discoverer.check_sum(a=1, b=1, total=2)"

    def test_reads_theory_skip(self, sink):
        discoverer = TheoryDiscoverer(sink)

        cases = discoverer.discover(ENABLED, TestMethod.from_callable(check_skipped))

        assert kinds(cases) == [TestCaseKind.SKIPPED]
        assert cases[0].skip_reason == "waiting on upstream fix"

    def test_missing_member_defers(self, sink):
        method = TestMethod.from_callable(check_skipped)

        cases = TheoryDiscoverer(sink).expand(ENABLED, method, [MemberData(name="MISSING")])

        assert kinds(cases) == [TestCaseKind.THEORY]
        assert "Could not find member 'MISSING'" in sink.messages[0]

    def test_uses_substituted_factory(self, sink):
        calls = []

        class RecordingFactory:
            def create_skip(self, options, method, skip_reason):
                calls.append(("skip", skip_reason))
                return "skip"

            def create_data_row(self, options, method, data_row, *, index=0):
                calls.append(("row", tuple(data_row), index))
                return "row"

            def create_theory(self, options, method, *, directives=None):
                calls.append(("theory", tuple(directives or ())))
                return "theory"

            def create_execution_error(self, options, method, error_message):
                calls.append(("error", error_message))
                return "error"

        discoverer = TheoryDiscoverer(sink, factory=RecordingFactory())

        cases = discoverer.expand(ENABLED, METHOD, [InlineData(values=(1, 2, 3))])

        assert cases == ["row"]
        assert calls == [("row", (1, 2, 3), 0)]


MODULE_ROWS = [(1, 2), (3, 4)]


class PairTheories:
    @theory
    @member_data("MODULE_ROWS")
    def check_pair(self, a, b):
        pass


class TestMemberLookupFallback:
    def test_owner_without_member_uses_module_rows(self, sink):
        method = TestMethod.from_callable(PairTheories.check_pair, owner=PairTheories)

        cases = TheoryDiscoverer(sink).discover(ENABLED, method)

        assert kinds(cases) == [TestCaseKind.DATA_ROW, TestCaseKind.DATA_ROW]
        assert [case.arguments for case in cases] == [(1, 2), (3, 4)]
        assert sink.messages == []
