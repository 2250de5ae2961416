"""Linked JSON program adapter.

Implements ProgramPort by reading a linked code-to-json document that
was written next to the project's tsconfig.json.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from docrun.core.errors import ProgramLoadError
from docrun.core.models import LinkedProgram, PackageInfo
from docrun.core.ports import ProgramPort

from .document import parse_linked_document

logger = logging.getLogger(__name__)


class LinkedJsonProgramAdapter(ProgramPort):
    """Loads a program from a linked code-to-json document on disk."""

    def __init__(
        self,
        tsconfig_name: str = "tsconfig.json",
        linked_data_file: str = "code-to-json.linked.json",
    ):
        """Initialize linked JSON program adapter.

        Args:
            tsconfig_name: Project configuration file, relative to the project.
            linked_data_file: Linked document path, relative to the project
                unless absolute.
        """
        self.tsconfig_name = tsconfig_name
        self.linked_data_file = linked_data_file

    async def load_program(
        self, project_path: str, package: PackageInfo
    ) -> LinkedProgram:
        """Load the linked program for a project."""
        data = await asyncio.to_thread(self._read_document, Path(project_path))
        return parse_linked_document(data, package)

    def _read_document(self, project_dir: Path) -> Any:
        tsconfig = project_dir / self.tsconfig_name
        if not tsconfig.is_file():
            raise ProgramLoadError(f"Could not load project configuration {tsconfig}")

        linked_path = project_dir / self.linked_data_file
        logger.info(f"Reading linked documentation from {linked_path}")
        try:
            return json.loads(linked_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ProgramLoadError(f"Linked documentation not found: {linked_path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ProgramLoadError(f"Could not read linked documentation {linked_path}: {e}") from e
