"""Exceptions raised across the docrun core and its adapters."""


class DocRunError(Exception):
    """Base class for docrun errors."""


class PackageNotFoundError(DocRunError):
    """No package descriptor could be found for the program under test."""

    def __init__(self, search_path: str):
        super().__init__(f'Could not find package.json via search path "{search_path}"')
        self.search_path = search_path


class ProgramLoadError(DocRunError):
    """The program configuration or its linked documentation could not be loaded."""


class TestExecutionError(DocRunError):
    """A doctest failed inside the external runner."""

    __test__ = False  # not a pytest test class

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
