"""Diagnostic message sinks."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from datatheory.config import DiscoveryOptions


class DiagnosticSink(Protocol):
    """Write-only channel for discovery diagnostics."""

    def emit(self, message: str) -> None:
        """Record a diagnostic message."""
        ...


@dataclass
class LoggingDiagnosticSink:
    """Sends diagnostics to the ``datatheory.diagnostics`` logger."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("datatheory.diagnostics"))
    level: int = logging.WARNING

    def emit(self, message: str) -> None:
        self.logger.log(self.level, message)


@dataclass
class ConsoleDiagnosticSink:
    """Prints diagnostics to a rich console (stderr by default)."""

    console: Console = field(default_factory=lambda: Console(stderr=True))

    def emit(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")


class CapturingDiagnosticSink:
    """Keeps every message in memory. Safe for concurrent writers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: list[str] = []

    def emit(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        """Snapshot of the messages received so far."""
        with self._lock:
            return list(self._messages)


class NullDiagnosticSink:
    """Discards every message."""

    def emit(self, message: str) -> None:
        return None


def default_diagnostic_sink(options: DiscoveryOptions) -> DiagnosticSink:
    """Console sink when diagnostics are requested, log sink otherwise."""
    if options.diagnostic_messages:
        return ConsoleDiagnosticSink()
    return LoggingDiagnosticSink()
