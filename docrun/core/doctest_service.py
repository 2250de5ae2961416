"""Doctest run orchestration.

This module implements the driving port that finds a program's
package, loads its linked documentation, extracts doctests and runs
them concurrently through the runner port, reporting as it goes.
"""

import asyncio
import json
import logging

from .errors import PackageNotFoundError
from .extractor import DocTestExtractor
from .models import (
    DocTest,
    DocTestFile,
    DocTestSymbol,
    ProgramDocTests,
    RunSummary,
    SymbolOutcome,
    SymbolResult,
)
from .ports import (
    DocTestPort,
    PackageLocatorPort,
    ProgramPort,
    ReporterPort,
    RunnerPort,
)

logger = logging.getLogger(__name__)


def _describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


class DocTestService(DocTestPort):
    """Implements a doctest run.

    Files, the symbols of a file, and the doctests of a symbol are
    each launched together and joined once all of them have settled.
    A failing doctest never cancels its siblings and never escapes the
    symbol it belongs to.
    """

    def __init__(
        self,
        package_locator: PackageLocatorPort,
        program: ProgramPort,
        runner: RunnerPort,
        reporter: ReporterPort,
        extractor: DocTestExtractor | None = None,
    ):
        self.package_locator = package_locator
        self.program = program
        self.runner = runner
        self.reporter = reporter
        self.extractor = extractor or DocTestExtractor()

    async def doctest_program(self, path: str) -> RunSummary:
        """Find and run the doctests for the program found at a path."""
        package = await self.package_locator.find_package(path)
        if package is None:
            raise PackageNotFoundError(path)
        logger.info(f"Using package {package.name or '<unnamed>'} at {package.path}")

        linked = await self.program.load_program(path, package)
        files = self.extractor.gather_program_doc_tests(linked)
        logger.info(f"Found {len(files)} files with export tables")

        summary = await self.run(files)
        await self.reporter.summary(summary)
        return summary

    async def run(self, files: ProgramDocTests) -> RunSummary:
        """Run every doctest of the given files and collect the results."""
        file_results = await asyncio.gather(*(self._run_file(f) for f in files))

        results: list[SymbolResult] = []
        without_doc_tests: list[str] = []
        for doc_test_file, symbol_results in zip(files, file_results):
            if not doc_test_file.symbols:
                without_doc_tests.append(doc_test_file.name)
            results.extend(symbol_results)

        return RunSummary(
            results=tuple(results),
            files_without_doc_tests=tuple(without_doc_tests),
        )

    async def _run_file(self, doc_test_file: DocTestFile) -> list[SymbolResult]:
        if not doc_test_file.symbols:
            await self.reporter.file_without_doc_tests(doc_test_file.name)
            return []

        await self.reporter.file_started(doc_test_file.name)
        return list(
            await asyncio.gather(
                *(self._run_symbol(doc_test_file.name, s) for s in doc_test_file.symbols)
            )
        )

    async def _run_symbol(self, file_name: str, symbol: DocTestSymbol) -> SymbolResult:
        if not symbol.tests:
            await self.reporter.symbol_without_doc_tests(file_name, symbol.name)
            return SymbolResult(file_name, symbol.name, SymbolOutcome.SKIPPED)

        outcomes = await asyncio.gather(
            *(self._run_test(t) for t in symbol.tests),
            return_exceptions=True,
        )

        errors: list[str] = []
        for outcome in outcomes:
            if isinstance(outcome, Exception):
                errors.append(_describe_error(outcome))
            elif isinstance(outcome, BaseException):
                # Cancellation and interrupts are not test failures
                raise outcome

        if errors:
            logger.debug(
                f"{file_name}.{symbol.name}: "
                f"{len(errors)} of {len(symbol.tests)} doctests failed"
            )
            await self.reporter.symbol_failed(file_name, symbol.name, tuple(errors))
            return SymbolResult(file_name, symbol.name, SymbolOutcome.FAILED, tuple(errors))

        await self.reporter.symbol_passed(file_name, symbol.name)
        return SymbolResult(file_name, symbol.name, SymbolOutcome.PASSED)

    async def _run_test(self, test: DocTest) -> None:
        logger.debug(f"invoking runTest({json.dumps(test.to_payload(), indent=2)})")
        await self.runner.run_test(test)
