"""Port interfaces for the docrun doctest runner.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - PackageLocatorPort: Find the package descriptor of a program
   - ProgramPort: Build, walk and link a program's documentation
   - RunnerPort: Evaluate a single doctest
   - ReporterPort: Report progress and results

2. **Driving Ports** (adapters/external systems call into core)
   - DocTestPort: Entry point for a doctest run
"""

from abc import ABC, abstractmethod

from .models import DocTest, LinkedProgram, PackageInfo, RunSummary


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class PackageLocatorPort(ABC):
    """Port for locating the package descriptor nearest to a path."""

    @abstractmethod
    async def find_package(self, search_path: str) -> PackageInfo | None:
        """Find the nearest package descriptor.

        Args:
            search_path: Directory to start searching from.

        Returns:
            PackageInfo for the nearest descriptor, or None if none exists.
        """


class ProgramPort(ABC):
    """Port for obtaining the linked documentation model of a program.

    Adapters cover the whole external pipeline: building a type-checked
    program from the project configuration, walking it for documentation
    metadata, formatting and linking the result.
    """

    @abstractmethod
    async def load_program(
        self, project_path: str, package: PackageInfo
    ) -> LinkedProgram:
        """Load the linked program for a project.

        Args:
            project_path: Root directory of the project.
            package: Package descriptor, used to normalize module paths.

        Returns:
            The linked program snapshot.

        Raises:
            ProgramLoadError: If the project configuration or the linked
                data cannot be loaded. Fatal for the run.
        """


class RunnerPort(ABC):
    """Port for evaluating a single doctest.

    Each invocation must be isolated from the others; the core launches
    them concurrently.
    """

    @abstractmethod
    async def run_test(self, test: DocTest) -> None:
        """Evaluate the import lines, then the code lines, as one unit.

        Args:
            test: The doctest to run.

        Raises:
            Exception: If evaluation or an embedded assertion fails.
                The message is shown in the report.
        """


class ReporterPort(ABC):
    """Port for reporting doctest progress and results."""

    @abstractmethod
    async def file_without_doc_tests(self, file_name: str) -> None:
        """Report a file that exports no symbols with doctests."""

    @abstractmethod
    async def file_started(self, file_name: str) -> None:
        """Report that a file's doctests are about to run."""

    @abstractmethod
    async def symbol_without_doc_tests(self, file_name: str, symbol_name: str) -> None:
        """Report a symbol that has no runnable doctests."""

    @abstractmethod
    async def symbol_passed(self, file_name: str, symbol_name: str) -> None:
        """Report a symbol whose doctests all passed."""

    @abstractmethod
    async def symbol_failed(
        self, file_name: str, symbol_name: str, errors: tuple[str, ...]
    ) -> None:
        """Report a symbol with at least one failing doctest.

        Args:
            file_name: Module the symbol belongs to.
            symbol_name: Exported name of the symbol.
            errors: Every failure message, in doctest order.
        """

    @abstractmethod
    async def summary(self, summary: RunSummary) -> None:
        """Report the totals of a finished run."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class DocTestPort(ABC):
    """Port for running the doctests of a program.

    Driving port: the command line entry point invokes it.
    """

    @abstractmethod
    async def doctest_program(self, path: str) -> RunSummary:
        """Find and run the doctests of the program at a path.

        Args:
            path: Project directory.

        Returns:
            Summary of the run.

        Raises:
            PackageNotFoundError: If no package descriptor can be found.
            ProgramLoadError: If the program cannot be loaded.
        """
