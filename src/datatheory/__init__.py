"""datatheory - expand data-driven theories into test cases."""

from .cases import (
    DataRowTestCase,
    ExecutionErrorTestCase,
    SkippedTestCase,
    TestCase,
    TestCaseKind,
    TheoryTestCase,
)
from .collection import collect, collect_module, find_theories
from .config import DiscoveryOptions, MethodDisplay
from .data import (
    ProviderResolver,
    class_data,
    file_data,
    inline_data,
    member_data,
    provider_for,
    theory,
)
from .diagnostics import (
    CapturingDiagnosticSink,
    ConsoleDiagnosticSink,
    LoggingDiagnosticSink,
    NullDiagnosticSink,
)
from .discoverer import TheoryDiscoverer
from .factory import DefaultTestCaseFactory
from .method import TestMethod
from .version import __version__


__all__ = [
    # Declaring theories
    "theory",
    "inline_data",
    "member_data",
    "class_data",
    "file_data",
    # Discovery
    "TheoryDiscoverer",
    "DiscoveryOptions",
    "MethodDisplay",
    "TestMethod",
    "ProviderResolver",
    "provider_for",
    "DefaultTestCaseFactory",
    "collect",
    "collect_module",
    "find_theories",
    # Cases
    "TestCase",
    "TestCaseKind",
    "SkippedTestCase",
    "DataRowTestCase",
    "TheoryTestCase",
    "ExecutionErrorTestCase",
    # Diagnostics
    "CapturingDiagnosticSink",
    "ConsoleDiagnosticSink",
    "LoggingDiagnosticSink",
    "NullDiagnosticSink",
    "__version__",
]
