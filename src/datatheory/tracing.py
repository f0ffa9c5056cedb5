"""Discovery tracer - wraps theory expansion in spans."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.trace import Span, TracerProvider

from datatheory.config import DiscoveryOptions
from datatheory.version import __version__


if TYPE_CHECKING:
    from datatheory.cases import TestCase
    from datatheory.method import TestMethod


@dataclass
class DiscoveryTracer:
    """Handles tracing spans for theory discovery."""

    enabled: bool = False
    tracer_provider: TracerProvider | None = None

    @classmethod
    def from_options(cls, options: DiscoveryOptions) -> DiscoveryTracer:
        return cls(enabled=options.trace_discovery)

    @contextmanager
    def span(self, method: TestMethod) -> Iterator[Span | None]:
        """Context manager for optional tracing."""
        if not self.enabled:
            yield None
            return

        tracer = trace.get_tracer("datatheory", __version__, tracer_provider=self.tracer_provider)
        with tracer.start_as_current_span(f"theory.discover.{method.full_name}") as span:
            span.set_attribute("theory.type", method.type_name)
            span.set_attribute("theory.method", method.method_name)
            yield span

    def record(self, span: Span | None, cases: Sequence[TestCase]) -> None:
        """Record span attributes from the expansion result."""
        if not span:
            return
        span.set_attribute("theory.case_count", len(cases))
        if cases:
            span.set_attribute("theory.outcome", cases[0].kind.value)
