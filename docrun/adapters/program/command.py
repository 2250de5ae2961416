"""Command program adapter.

Implements ProgramPort by invoking an external command that builds,
walks and links the program, and prints the linked code-to-json
document on stdout.

Invocation format: <command...> <project path>
"""

import asyncio
import json
import logging
import subprocess
from typing import Any

from docrun.core.errors import ProgramLoadError
from docrun.core.models import LinkedProgram, PackageInfo
from docrun.core.ports import ProgramPort

from .document import parse_linked_document

logger = logging.getLogger(__name__)


class CommandProgramAdapter(ProgramPort):
    """Loads a program from the output of an external linking command."""

    def __init__(self, command: list[str]):
        """Initialize command program adapter.

        Args:
            command: Executable and leading arguments; the project path is
                appended as the final argument.
        """
        if not command:
            raise ValueError("command must not be empty")
        self.command = command

    async def load_program(
        self, project_path: str, package: PackageInfo
    ) -> LinkedProgram:
        """Load the linked program for a project."""
        loop = asyncio.get_running_loop()
        output = await loop.run_in_executor(None, self._run_command, project_path)

        try:
            data: Any = json.loads(output)
        except json.JSONDecodeError as e:
            raise ProgramLoadError(
                f"Linking command did not print valid JSON: {e}. Output: {output[:200]}"
            ) from e
        return parse_linked_document(data, package)

    def _run_command(self, project_path: str) -> str:
        """Synchronous wrapper for subprocess call."""
        args = [*self.command, project_path]
        logger.info(f"Running linking command: {' '.join(args)}")
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                cwd=project_path,
            )
        except OSError as e:
            raise ProgramLoadError(f"Could not start linking command {args[0]!r}: {e}") from e

        if result.returncode != 0:
            error_output = result.stderr or result.stdout
            raise ProgramLoadError(f"Linking command failed: {error_output.strip()}")
        return result.stdout
