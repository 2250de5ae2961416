"""Doctest extraction from linked documentation.

This module turns the documentation attached to a program's exported
symbols into runnable doctests, aggregating them per symbol, per file
and per program. Every step is a pure function over domain objects.
"""

import re

from .models import (
    CustomTag,
    DocTest,
    DocTestFile,
    DocTestSymbol,
    LinkedProgram,
    LinkedSourceFile,
    LinkedSymbol,
    ProgramDocTests,
    TagKind,
)

# `import x`, `import {a} from`, `import * as`, `import "./side-effect"`.
# Identifiers such as `importantValue` and `import(...)` expressions are code.
_IMPORT_STATEMENT = re.compile(r"import(?:$|[\s{*\"'])")


class DocTestExtractor:
    """Collects doctests from a linked program.

    No external dependencies; pure functions over domain objects.
    All methods are static as the class carries no state.
    """

    @staticmethod
    def is_import_line(line: str) -> bool:
        """Does this line (ignoring leading whitespace) start an import statement?"""
        return _IMPORT_STATEMENT.match(line.lstrip()) is not None

    @staticmethod
    def gather_doc_test(tag: CustomTag) -> DocTest | None:
        """Gather the code of a single `@example` or `@doctest` block.

        Lines are classified as imports or code; blank lines are dropped.
        Both sequences keep source order, and the original (untrimmed)
        line is stored, except that the carriage return of a CRLF line
        ending is removed.

        Returns:
            The doctest, or None if the tag has no content or only
            blank lines.
        """
        if tag.content is None:
            return None

        code_lines: list[str] = []
        import_lines: list[str] = []
        for line in "".join(tag.content).split("\n"):
            line = line.removesuffix("\r")
            if not line.strip():
                continue
            if DocTestExtractor.is_import_line(line):
                import_lines.append(line)
            else:
                code_lines.append(line)

        if not code_lines and not import_lines:
            return None
        return DocTest(code_lines=tuple(code_lines), import_lines=tuple(import_lines))

    @staticmethod
    def gather_symbol_doc_tests(symbol: LinkedSymbol) -> DocTestSymbol | None:
        """Gather the `@example` and `@doctest` blocks of a symbol.

        Returns:
            The symbol's doctests, or None if it has no documentation,
            no qualifying tags, or only tags without content.
        """
        documentation = symbol.documentation
        if documentation is None or documentation.custom_tags is None:
            return None

        examples = [
            tag
            for tag in documentation.custom_tags
            if TagKind.from_tag_name(tag.tag_name) is not None
        ]
        if not examples:
            return None

        tests = tuple(
            test
            for test in map(DocTestExtractor.gather_doc_test, examples)
            if test is not None
        )
        if not tests:
            return None

        return DocTestSymbol(name=symbol.name, tests=tests)

    @staticmethod
    def gather_file_doc_tests(source_file: LinkedSourceFile) -> DocTestFile:
        """Gather doctests for every exported symbol of a file.

        Always returns a DocTestFile, with an empty symbol tuple when the
        file has no export table or nothing it exports has doctests.
        """
        file_symbol = source_file.symbol
        exports = file_symbol.exports if file_symbol is not None else None
        symbols: tuple[DocTestSymbol, ...] = ()
        if exports is not None:
            symbols = tuple(
                found
                for found in map(DocTestExtractor.gather_symbol_doc_tests, exports.values())
                if found is not None
            )
        return DocTestFile(name=source_file.module_name, symbols=symbols)

    @staticmethod
    def gather_program_doc_tests(program: LinkedProgram) -> ProgramDocTests:
        """Gather doctests for every file of a program that has an export table.

        Files keep the order of the program's source file mapping.
        """
        return tuple(
            DocTestExtractor.gather_file_doc_tests(source_file)
            for source_file in program.source_files.values()
            if source_file is not None and source_file.has_exports
        )
