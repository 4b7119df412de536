"""Parse failures and colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ParseError(Exception):
    """The input did not parse completely.

    Carries no position: malformed syntax and trailing input after a valid
    prefix are reported the same way.
    """

    def __init__(self, entry: str, text: str) -> None:
        self.entry = entry
        self.text = text
        super().__init__(f"cannot parse {entry}: {text!r}")


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass
class Diagnostic:
    """A single diagnostic about one piece of signature text."""

    severity: Severity
    code: str
    message: str
    origin: str = ""
    source: str | None = None
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in compiler style, optionally with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        # Header: error[E001]: message
        lines.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        if diag.origin:
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {diag.origin}")

        if diag.source is not None:
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)} {diag.source}")

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)
