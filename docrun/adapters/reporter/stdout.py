"""Stdout reporter adapter.

Implements ReporterPort by printing a hierarchical report (file, then
symbol) to the terminal.
"""

import sys
from typing import TextIO

from docrun.core.models import RunSummary
from docrun.core.ports import ReporterPort


class StdoutReporter(ReporterPort):
    """Prints doctest progress and results with human-readable formatting."""

    def __init__(self, stream: TextIO | None = None, verbose: bool = False):
        """Initialize stdout reporter.

        Args:
            stream: Where to write; defaults to the current sys.stdout.
            verbose: If True, list every failing symbol in the summary.
        """
        self.stream = stream
        self.verbose = verbose

    def _print(self, line: str) -> None:
        print(line, file=self.stream or sys.stdout, flush=True)

    async def file_without_doc_tests(self, file_name: str) -> None:
        self._print(f"  📦  {file_name} - no exported symbols w/ doctests")

    async def file_started(self, file_name: str) -> None:
        self._print(f"  📦  {file_name}")

    async def symbol_without_doc_tests(self, file_name: str, symbol_name: str) -> None:
        self._print(f"    {symbol_name} - no doctests")

    async def symbol_passed(self, file_name: str, symbol_name: str) -> None:
        self._print(f"    ✅ {symbol_name}")

    async def symbol_failed(
        self, file_name: str, symbol_name: str, errors: tuple[str, ...]
    ) -> None:
        self._print(f"    ❌ {symbol_name}: {'; '.join(errors)}")

    async def summary(self, summary: RunSummary) -> None:
        self._print(self._format_summary(summary, self.verbose))

    @staticmethod
    def _format_summary(summary: RunSummary, verbose: bool) -> str:
        """Format the closing totals line (and failures, when verbose)."""
        lines = [
            "",
            f"{summary.passed} passed, {summary.failed} failed, "
            f"{summary.skipped} skipped, "
            f"{len(summary.files_without_doc_tests)} files without doctests",
        ]
        if verbose:
            for result in summary.results:
                if result.errors:
                    lines.append(f"  {result.file_name}.{result.symbol_name}")
                    lines.extend(f"    - {error}" for error in result.errors)
        return "\n".join(lines)
