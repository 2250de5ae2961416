"""Domain models for the docrun doctest runner.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TypeAlias


class TagKind(Enum):
    """Documentation tags that carry runnable examples."""

    EXAMPLE = "example"
    DOCTEST = "doctest"

    @classmethod
    def from_tag_name(cls, tag_name: str) -> "TagKind | None":
        """Return the tag kind for an exact (case-sensitive) tag name, if any."""
        for kind in cls:
            if kind.value == tag_name:
                return kind
        return None


# ============================================================================
# Linked program snapshot (consumed from the formatter/linker)
# ============================================================================


@dataclass(frozen=True)
class CustomTag:
    """A single `@tag` block from a documentation comment."""

    tag_name: str
    content: tuple[str, ...] | None = None  # raw fragments, joined on use


@dataclass(frozen=True)
class Documentation:
    """Documentation metadata attached to a symbol."""

    custom_tags: tuple[CustomTag, ...] | None = None


@dataclass(frozen=True)
class LinkedSymbol:
    """A declaration in the linked program.

    `exports` is only present on symbols that expose an export table,
    typically the symbol of a source file (its module).
    """

    name: str
    documentation: Documentation | None = None
    exports: Mapping[str, "LinkedSymbol"] | None = None  # converted to proxy in __post_init__

    def __post_init__(self) -> None:
        """Convert exports dict to read-only proxy."""
        if isinstance(self.exports, dict):
            object.__setattr__(self, "exports", MappingProxyType(self.exports))


@dataclass(frozen=True)
class LinkedSourceFile:
    """A source file of the linked program."""

    module_name: str
    symbol: LinkedSymbol | None = None

    @property
    def has_exports(self) -> bool:
        """True when the file's symbol carries an export table."""
        return self.symbol is not None and self.symbol.exports is not None


@dataclass(frozen=True)
class LinkedProgram:
    """Cross-referenced view of every file in a program."""

    source_files: Mapping[str, LinkedSourceFile | None]

    def __post_init__(self) -> None:
        """Convert source file dict to read-only proxy."""
        if isinstance(self.source_files, dict):
            object.__setattr__(
                self, "source_files", MappingProxyType(self.source_files)
            )


@dataclass(frozen=True)
class PackageInfo:
    """The package descriptor nearest to the program being tested."""

    path: str
    name: str
    main: str

    def __post_init__(self) -> None:
        """Validate package info invariants on creation."""
        if not self.path or not self.path.strip():
            raise ValueError("path must be a non-empty string")


# ============================================================================
# Extracted doctests
# ============================================================================


@dataclass(frozen=True)
class DocTest:
    """Runnable code extracted from one `@example` or `@doctest` block."""

    code_lines: tuple[str, ...]
    import_lines: tuple[str, ...]

    def to_payload(self) -> dict[str, list[str]]:
        """Shape expected by runners: import lines and code lines as arrays."""
        return {
            "codeArray": list(self.code_lines),
            "importsArray": list(self.import_lines),
        }


@dataclass(frozen=True)
class DocTestSymbol:
    """Doctests of a single exported symbol."""

    name: str
    tests: tuple[DocTest, ...]


@dataclass(frozen=True)
class DocTestFile:
    """Doctests of every exported symbol in a file.

    `symbols` may be empty: the file exists but nothing it exports
    carries doctests.
    """

    name: str
    symbols: tuple[DocTestSymbol, ...]


ProgramDocTests: TypeAlias = tuple[DocTestFile, ...]


# ============================================================================
# Run results
# ============================================================================


class SymbolOutcome(Enum):
    """Result of running every doctest of one symbol."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SymbolResult:
    """Outcome for one symbol, with every failure message in test order."""

    file_name: str
    symbol_name: str
    outcome: SymbolOutcome
    errors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate that failures carry messages and passes do not."""
        if self.outcome == SymbolOutcome.FAILED and not self.errors:
            raise ValueError("a failed symbol result must carry at least one error")
        if self.outcome != SymbolOutcome.FAILED and self.errors:
            raise ValueError(f"a {self.outcome.value} symbol result cannot carry errors")


@dataclass(frozen=True)
class RunSummary:
    """Summary of a doctest run across a whole program."""

    results: tuple[SymbolResult, ...] = ()
    files_without_doc_tests: tuple[str, ...] = ()

    def _count(self, outcome: SymbolOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def passed(self) -> int:
        return self._count(SymbolOutcome.PASSED)

    @property
    def failed(self) -> int:
        return self._count(SymbolOutcome.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(SymbolOutcome.SKIPPED)

    @property
    def succeeded(self) -> bool:
        """True when no symbol failed."""
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
