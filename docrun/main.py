"""Composition root for the docrun doctest runner.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Command line entry point
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from docrun.adapters.package.node import NodePackageLocator
from docrun.adapters.program.command import CommandProgramAdapter
from docrun.adapters.program.linked_json import LinkedJsonProgramAdapter
from docrun.adapters.reporter.stdout import StdoutReporter
from docrun.adapters.runner.subprocess_runner import SubprocessRunner
from docrun.config import Settings, load_settings
from docrun.core.doctest_service import DocTestService
from docrun.core.models import RunSummary
from docrun.core.ports import ProgramPort

EXIT_FATAL = 2
EXIT_INTERRUPTED = 130


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Logs go to stderr so the report on stdout stays readable.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def create_service(settings: Settings, project_path: str) -> DocTestService:
    """Instantiate adapters from configuration and wire the doctest service."""
    logger = logging.getLogger(__name__)

    program: ProgramPort
    if settings.program_backend == "linked_json":
        program = LinkedJsonProgramAdapter(
            tsconfig_name=settings.tsconfig_name,
            linked_data_file=settings.linked_data_file,
        )
        logger.info("Program adapter: linked JSON")
    elif settings.program_backend == "command":
        program = CommandProgramAdapter(command=settings.program_args)
        logger.info("Program adapter: command")
    else:
        raise ValueError(f"Unknown program backend: {settings.program_backend}")

    return DocTestService(
        package_locator=NodePackageLocator(),
        program=program,
        runner=SubprocessRunner(command=settings.runner_args, cwd=project_path),
        reporter=StdoutReporter(verbose=settings.debug),
    )


async def bootstrap(path: str | None = None, settings: Settings | None = None) -> RunSummary:
    """Load configuration, wire adapters, and run the doctests of a program.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters and the doctest service
    4. Run the doctests for the program at the path

    Raises:
        PackageNotFoundError: If no package.json is found for the path.
        ProgramLoadError: If the program cannot be loaded.
    """
    # Step 1: Load configuration
    if settings is None:
        settings = load_settings()

    # Step 2: Configure logging
    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    # Step 3: Wire the service
    project_path = path or settings.project_path
    service = create_service(settings, project_path)

    # Step 4: Run
    logger.info(f"Running doctests for {project_path}")
    return await service.doctest_program(project_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docrun",
        description="Run the @example and @doctest blocks of a program's exported symbols.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="project directory (default: PROJECT_PATH setting, else the current directory)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Application entry point.

    Exit codes:
        0: Every doctest passed
        1: At least one doctest failed
        2: Fatal setup error (no package.json, unloadable program, bad config)
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__name__)
    try:
        summary = asyncio.run(bootstrap(args.path))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(EXIT_FATAL)
    sys.exit(summary.exit_code)


if __name__ == "__main__":
    main()
