"""Core domain logic for the docrun doctest runner.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .errors import (
    DocRunError,
    PackageNotFoundError,
    ProgramLoadError,
    TestExecutionError,
)
from .models import (
    CustomTag,
    DocTest,
    DocTestFile,
    DocTestSymbol,
    Documentation,
    LinkedProgram,
    LinkedSourceFile,
    LinkedSymbol,
    PackageInfo,
    RunSummary,
    SymbolOutcome,
    SymbolResult,
    TagKind,
)

__all__ = [
    "CustomTag",
    "DocRunError",
    "DocTest",
    "DocTestFile",
    "DocTestSymbol",
    "Documentation",
    "LinkedProgram",
    "LinkedSourceFile",
    "LinkedSymbol",
    "PackageInfo",
    "PackageNotFoundError",
    "ProgramLoadError",
    "RunSummary",
    "SymbolOutcome",
    "SymbolResult",
    "TagKind",
    "TestExecutionError",
]
