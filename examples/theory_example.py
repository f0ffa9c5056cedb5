"""Example of declaring theories and expanding them with datatheory."""

import sys

from datatheory import (
    CapturingDiagnosticSink,
    DiscoveryOptions,
    TheoryDiscoverer,
    collect_module,
    file_data,
    inline_data,
    member_data,
    theory,
)


# 1. Define your system under test
def to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


# 2. Declare theories with data directives
@theory
@inline_data(37, 98.6)
@file_data("data/conversions.yaml")
def theory_conversion(celsius, fahrenheit):
    assert round(to_fahrenheit(celsius), 1) == fahrenheit


class ConversionTheories:
    EDGE_CASES = [(-273.15, -459.67)]

    @theory
    @member_data("EDGE_CASES")
    def theory_absolute_zero(self, celsius, fahrenheit):
        assert round(to_fahrenheit(celsius), 2) == fahrenheit

    @theory(skip="Kelvin support is not implemented")
    def theory_kelvin(self, kelvin, celsius):
        pass

    @theory
    @member_data("live_readings", disable_discovery_enumeration=True)
    def theory_live(self, celsius, fahrenheit):
        assert round(to_fahrenheit(celsius), 1) == fahrenheit

    @staticmethod
    def live_readings():
        return [(21.5, 70.7)]


# 3. Expand them
if __name__ == "__main__":
    sink = CapturingDiagnosticSink()
    discoverer = TheoryDiscoverer(sink)
    cases = collect_module(sys.modules[__name__], options=DiscoveryOptions(), discoverer=discoverer)

    for case in cases:
        print(f"{case.kind.value:<16} {case.display_name}")
    for message in sink.messages:
        print(f"diagnostic: {message}")
