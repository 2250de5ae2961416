"""Subprocess runner adapter.

Implements RunnerPort by rendering a doctest as a module (import lines
first, then code lines) and piping it to an evaluator command on stdin,
e.g. ``node --input-type=module``.
"""

import asyncio
import logging

from docrun.core.errors import TestExecutionError
from docrun.core.models import DocTest
from docrun.core.ports import RunnerPort

logger = logging.getLogger(__name__)


def render_module(test: DocTest) -> str:
    """Render a doctest as module source: imports, then code."""
    return "\n".join((*test.import_lines, *test.code_lines)) + "\n"


def summarize_stderr(stderr: str) -> str | None:
    """Pick the line of an evaluator's stderr that names the error."""
    lines = [line.strip() for line in stderr.splitlines() if line.strip()]
    for line in lines:
        if "Error" in line:
            return line
    return lines[0] if lines else None


class SubprocessRunner(RunnerPort):
    """Evaluates each doctest in its own evaluator process.

    Processes are awaited on the event loop, so every concurrent
    ``run_test`` call has its evaluator running at the same time.
    """

    def __init__(self, command: list[str], cwd: str | None = None):
        """Initialize subprocess runner.

        Args:
            command: Evaluator executable and arguments; reads the module on stdin.
            cwd: Working directory for the evaluator, so relative imports resolve
                against the project.
        """
        if not command:
            raise ValueError("command must not be empty")
        self.command = command
        self.cwd = cwd

    async def run_test(self, test: DocTest) -> None:
        """Evaluate a doctest; raise TestExecutionError if it fails."""
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
            )
        except OSError as e:
            raise TestExecutionError(
                f"Could not start runner {self.command[0]!r}: {e}"
            ) from e

        _, stderr_bytes = await process.communicate(render_module(test).encode())
        stderr = stderr_bytes.decode(errors="replace")

        if process.returncode != 0:
            logger.debug(f"Runner stderr:\n{stderr}")
            message = summarize_stderr(stderr) or (
                f"runner exited with status {process.returncode}"
            )
            raise TestExecutionError(
                message, returncode=process.returncode, stderr=stderr
            )
