"""Node package locator adapter.

Implements PackageLocatorPort by walking up the directory tree to the
nearest package.json.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from docrun.core.errors import ProgramLoadError
from docrun.core.models import PackageInfo
from docrun.core.ports import PackageLocatorPort

logger = logging.getLogger(__name__)

PACKAGE_DESCRIPTOR = "package.json"


class NodePackageLocator(PackageLocatorPort):
    """Finds the nearest package.json at or above a search path."""

    def __init__(self, descriptor_name: str = PACKAGE_DESCRIPTOR):
        self.descriptor_name = descriptor_name

    async def find_package(self, search_path: str) -> PackageInfo | None:
        """Find the nearest package descriptor."""
        return await asyncio.to_thread(self._find_package, search_path)

    def _find_package(self, search_path: str) -> PackageInfo | None:
        start = Path(search_path).resolve()
        for directory in (start, *start.parents):
            candidate = directory / self.descriptor_name
            if candidate.is_file():
                logger.debug(f"Found package descriptor at {candidate}")
                return self._read_package(candidate)
        logger.warning(f"No {self.descriptor_name} found at or above {start}")
        return None

    @staticmethod
    def _read_package(descriptor: Path) -> PackageInfo:
        try:
            contents: Any = json.loads(descriptor.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ProgramLoadError(f"Could not read package descriptor {descriptor}: {e}") from e
        if not isinstance(contents, dict):
            raise ProgramLoadError(f"Package descriptor {descriptor} is not a JSON object")

        package_dir = str(descriptor.parent)
        return PackageInfo(
            path=package_dir,
            name=contents.get("name") or "",
            # doc:main lets a package point the doc tooling at its sources
            main=contents.get("doc:main") or contents.get("main") or package_dir,
        )
