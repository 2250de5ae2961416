"""Unit tests for the doctest run orchestration.

Tests verify that DocTestService fans out over files, symbols and
doctests, contains failures at the symbol level, and reports a
structured summary.
"""

import json
import logging

import pytest

from docrun.core.doctest_service import DocTestService
from docrun.core.errors import PackageNotFoundError, ProgramLoadError
from docrun.core.models import (
    CustomTag,
    DocTest,
    DocTestFile,
    DocTestSymbol,
    Documentation,
    LinkedProgram,
    LinkedSourceFile,
    LinkedSymbol,
    PackageInfo,
    SymbolOutcome,
    SymbolResult,
)
from docrun.tests.fakes import (
    FakePackageLocatorPort,
    FakeProgramPort,
    FakeReporterPort,
    FakeRunnerPort,
)

# ============================================================================
# Test Fixtures
# ============================================================================


def doc_test(code: str) -> DocTest:
    return DocTest(code_lines=(code,), import_lines=())


@pytest.fixture
def package() -> PackageInfo:
    return PackageInfo(path="/work/math-lib", name="math-lib", main="src/index.ts")


@pytest.fixture
def math_program() -> LinkedProgram:
    """A program whose `math` module exports a documented `add`."""
    add = LinkedSymbol(
        name="add",
        documentation=Documentation(
            custom_tags=(
                CustomTag(
                    tag_name="example",
                    content=('import { add } from "./math";\n', "add(1, 2); // 3\n"),
                ),
            )
        ),
    )
    consts = LinkedSourceFile(
        module_name="consts",
        symbol=LinkedSymbol(name="consts", exports={"PI": LinkedSymbol(name="PI")}),
    )
    math = LinkedSourceFile(
        module_name="math", symbol=LinkedSymbol(name="math", exports={"add": add})
    )
    return LinkedProgram(source_files={"src/consts.ts": consts, "src/math.ts": math})


@pytest.fixture
def runner() -> FakeRunnerPort:
    return FakeRunnerPort()


@pytest.fixture
def reporter() -> FakeReporterPort:
    return FakeReporterPort()


def make_service(
    runner: FakeRunnerPort,
    reporter: FakeReporterPort,
    package: PackageInfo | None = None,
    program: LinkedProgram | None = None,
) -> DocTestService:
    return DocTestService(
        package_locator=FakePackageLocatorPort(package),
        program=FakeProgramPort(program),
        runner=runner,
        reporter=reporter,
    )


# ============================================================================
# End-to-end Tests
# ============================================================================


class TestDoctestProgram:
    """Full runs from path to summary."""

    @pytest.mark.asyncio
    async def test_math_add_example_passes(
        self,
        runner: FakeRunnerPort,
        reporter: FakeReporterPort,
        package: PackageInfo,
        math_program: LinkedProgram,
    ) -> None:
        service = make_service(runner, reporter, package, math_program)

        summary = await service.doctest_program("/work/math-lib")

        assert runner.started == [
            DocTest(
                code_lines=("add(1, 2); // 3",),
                import_lines=('import { add } from "./math";',),
            )
        ]
        assert reporter.events_named("symbol_passed") == [("symbol_passed", "math", "add")]
        assert summary.results == (SymbolResult("math", "add", SymbolOutcome.PASSED),)
        assert summary.files_without_doc_tests == ("consts",)
        assert summary.exit_code == 0
        assert reporter.summaries == [summary]

    @pytest.mark.asyncio
    async def test_each_invocation_is_logged_at_debug(
        self,
        runner: FakeRunnerPort,
        reporter: FakeReporterPort,
        package: PackageInfo,
        math_program: LinkedProgram,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        service = make_service(runner, reporter, package, math_program)

        with caplog.at_level(logging.DEBUG, logger="docrun.core.doctest_service"):
            await service.doctest_program("/work/math-lib")

        invocations = [
            record.getMessage()
            for record in caplog.records
            if record.levelno == logging.DEBUG
            and record.getMessage().startswith("invoking runTest(")
        ]
        assert len(invocations) == 1
        payload = json.loads(invocations[0].removeprefix("invoking runTest(").removesuffix(")"))
        assert payload == {
            "codeArray": ["add(1, 2); // 3"],
            "importsArray": ['import { add } from "./math";'],
        }

    @pytest.mark.asyncio
    async def test_file_without_doctests_reports_once_and_runs_nothing(
        self,
        runner: FakeRunnerPort,
        reporter: FakeReporterPort,
        package: PackageInfo,
    ) -> None:
        program = LinkedProgram(
            source_files={
                "src/consts.ts": LinkedSourceFile(
                    module_name="consts",
                    symbol=LinkedSymbol(name="consts", exports={"PI": LinkedSymbol(name="PI")}),
                )
            }
        )
        service = make_service(runner, reporter, package, program)

        summary = await service.doctest_program("/work/math-lib")

        assert reporter.events == [("file_without_doc_tests", "consts")]
        assert runner.run_call_count == 0
        assert summary.results == ()
        assert summary.succeeded

    @pytest.mark.asyncio
    async def test_missing_package_aborts_before_any_report(
        self,
        runner: FakeRunnerPort,
        reporter: FakeReporterPort,
        math_program: LinkedProgram,
    ) -> None:
        program_port = FakeProgramPort(math_program)
        service = DocTestService(
            package_locator=FakePackageLocatorPort(None),
            program=program_port,
            runner=runner,
            reporter=reporter,
        )

        with pytest.raises(PackageNotFoundError, match="/nowhere"):
            await service.doctest_program("/nowhere")

        assert program_port.load_calls == []
        assert reporter.events == []
        assert reporter.summaries == []
        assert runner.run_call_count == 0

    @pytest.mark.asyncio
    async def test_program_load_error_is_fatal(
        self,
        runner: FakeRunnerPort,
        reporter: FakeReporterPort,
        package: PackageInfo,
    ) -> None:
        program_port = FakeProgramPort()
        program_port.set_error(ProgramLoadError("no tsconfig.json"))
        service = DocTestService(
            package_locator=FakePackageLocatorPort(package),
            program=program_port,
            runner=runner,
            reporter=reporter,
        )

        with pytest.raises(ProgramLoadError):
            await service.doctest_program("/work/math-lib")
        assert reporter.events == []

    @pytest.mark.asyncio
    async def test_package_is_passed_to_program_loader(
        self,
        runner: FakeRunnerPort,
        reporter: FakeReporterPort,
        package: PackageInfo,
    ) -> None:
        program_port = FakeProgramPort()
        service = DocTestService(
            package_locator=FakePackageLocatorPort(package),
            program=program_port,
            runner=runner,
            reporter=reporter,
        )

        await service.doctest_program("/work/math-lib")

        assert program_port.load_calls == [("/work/math-lib", package)]


# ============================================================================
# Execution and Failure Semantics Tests
# ============================================================================


class TestRun:
    """Fan-out, joins and failure containment."""

    @pytest.mark.asyncio
    async def test_failure_reported_and_sibling_completes(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        t1, t2 = doc_test("ok();"), doc_test("boom();")
        runner.delay(t1, 0.02)
        runner.fail_with(t2, AssertionError("expected 3, got 4"))
        files = (DocTestFile("math", (DocTestSymbol("add", (t1, t2)),)),)

        summary = await make_service(runner, reporter).run(files)

        assert t1 in runner.completed
        assert reporter.events_named("symbol_failed") == [
            ("symbol_failed", "math", "add", ("expected 3, got 4",))
        ]
        assert summary.failed == 1
        assert summary.exit_code == 1

    @pytest.mark.asyncio
    async def test_every_failure_of_a_symbol_is_reported(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        t1, t2, t3 = doc_test("a();"), doc_test("b();"), doc_test("c();")
        runner.fail_with(t1, RuntimeError("first"))
        runner.fail_with(t3, ValueError("third"))
        files = (DocTestFile("m", (DocTestSymbol("f", (t1, t2, t3)),)),)

        summary = await make_service(runner, reporter).run(files)

        assert summary.results[0].errors == ("first", "third")
        assert runner.completed == [t2]

    @pytest.mark.asyncio
    async def test_error_without_message_uses_type_name(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        test = doc_test("x();")
        runner.fail_with(test, AssertionError())
        files = (DocTestFile("m", (DocTestSymbol("x", (test,)),)),)

        summary = await make_service(runner, reporter).run(files)

        assert summary.results[0].errors == ("AssertionError",)

    @pytest.mark.asyncio
    async def test_failure_does_not_affect_sibling_symbols_or_files(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        bad, good, other = doc_test("bad();"), doc_test("good();"), doc_test("other();")
        runner.fail_with(bad, RuntimeError("bad"))
        files = (
            DocTestFile("a", (DocTestSymbol("bad", (bad,)), DocTestSymbol("good", (good,)))),
            DocTestFile("b", (DocTestSymbol("other", (other,)),)),
        )

        summary = await make_service(runner, reporter).run(files)

        outcomes = {(r.file_name, r.symbol_name): r.outcome for r in summary.results}
        assert outcomes == {
            ("a", "bad"): SymbolOutcome.FAILED,
            ("a", "good"): SymbolOutcome.PASSED,
            ("b", "other"): SymbolOutcome.PASSED,
        }

    @pytest.mark.asyncio
    async def test_symbol_with_no_tests_is_skipped(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        files = (DocTestFile("m", (DocTestSymbol("f", ()),)),)

        summary = await make_service(runner, reporter).run(files)

        assert reporter.events == [
            ("file_started", "m"),
            ("symbol_without_doc_tests", "m", "f"),
        ]
        assert summary.skipped == 1
        assert summary.succeeded
        assert runner.run_call_count == 0

    @pytest.mark.asyncio
    async def test_doctests_of_a_symbol_run_concurrently(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        slow, fast = doc_test("slow();"), doc_test("fast();")
        runner.delay(slow, 0.05)
        files = (DocTestFile("m", (DocTestSymbol("f", (slow, fast)),)),)

        await make_service(runner, reporter).run(files)

        assert runner.started == [slow, fast]
        assert runner.completed == [fast, slow]

    @pytest.mark.asyncio
    async def test_symbols_and_files_run_concurrently(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        slow, fast, other = doc_test("slow();"), doc_test("fast();"), doc_test("other();")
        runner.delay(slow, 0.05)
        files = (
            DocTestFile("a", (DocTestSymbol("slow", (slow,)), DocTestSymbol("fast", (fast,)))),
            DocTestFile("b", (DocTestSymbol("other", (other,)),)),
        )

        await make_service(runner, reporter).run(files)

        passed = [event[2] for event in reporter.events_named("symbol_passed")]
        assert passed[-1] == "slow"
        assert set(passed) == {"slow", "fast", "other"}

    @pytest.mark.asyncio
    async def test_file_header_precedes_its_symbol_results(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        files = (
            DocTestFile("a", (DocTestSymbol("f", (doc_test("f();"),)),)),
            DocTestFile("b", (DocTestSymbol("g", (doc_test("g();"),)),)),
        )

        await make_service(runner, reporter).run(files)

        for file_name, symbol_name in [("a", "f"), ("b", "g")]:
            header = reporter.events.index(("file_started", file_name))
            result = reporter.events.index(("symbol_passed", file_name, symbol_name))
            assert header < result

    @pytest.mark.asyncio
    async def test_results_follow_file_and_symbol_order(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        first, second = doc_test("first();"), doc_test("second();")
        runner.delay(first, 0.03)
        files = (
            DocTestFile("a", (DocTestSymbol("first", (first,)),)),
            DocTestFile("b", (DocTestSymbol("second", (second,)),)),
        )

        summary = await make_service(runner, reporter).run(files)

        assert [r.symbol_name for r in summary.results] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_empty_program(
        self, runner: FakeRunnerPort, reporter: FakeReporterPort
    ) -> None:
        summary = await make_service(runner, reporter).run(())

        assert summary.results == ()
        assert summary.exit_code == 0
        assert reporter.events == []
