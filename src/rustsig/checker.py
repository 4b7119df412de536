"""Cheat sheet checker: parses every signature a sheet declares."""

from __future__ import annotations

from rustsig.config import CheatSheet, TypeSection
from rustsig.errors import Diagnostic, ParseError, Severity
from rustsig.parser import ParsedItem, parse_constraints, parse_impl, parse_trait_impl


class SheetChecker:
    """Collects diagnostics for one cheat sheet."""

    def __init__(self, origin: str = "<sheet>") -> None:
        self.origin = origin
        self.diagnostics: list[Diagnostic] = []
        self.checked = 0

    # ── Public API ──────────────────────────────────────────────

    def check(self, sheet: CheatSheet) -> int:
        """Parse every entry. Raises nothing; returns the number checked."""
        for section in sheet.types:
            self._check_section(section)
        return self.checked

    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    # ── Error helpers ───────────────────────────────────────────

    def _error(self, code: str, message: str, source: str, notes: list[str]) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code=code,
                message=message,
                origin=self.origin,
                source=source,
                notes=notes,
            )
        )

    def _warning(self, code: str, message: str, source: str) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                code=code,
                message=message,
                origin=self.origin,
                source=source,
            )
        )

    # ── Sections ────────────────────────────────────────────────

    def _check_section(self, section: TypeSection) -> None:
        header = parse_trait_impl if section.trait else parse_impl
        self.checked += 1
        try:
            header(section.type)
        except ParseError:
            self._error("E001", "cannot parse type header", section.type, [])

        if section.constraints is not None:
            self.checked += 1
            try:
                parse_constraints(section.constraints)
            except ParseError:
                self._error(
                    "E002", "cannot parse where-clause", section.constraints,
                    [f"in section for `{section.type}`"],
                )

        items = section.all_items()
        if not items:
            self._warning("W100", "type section lists no items", section.type)
        for item in items:
            self.checked += 1
            try:
                ParsedItem.parse(item)
            except ParseError:
                self._error(
                    "E003", "cannot parse item signature", item,
                    [f"in section for `{section.type}`"],
                )
