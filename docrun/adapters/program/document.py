"""Linked documentation document parsing.

Validates a linked code-to-json document with pydantic and converts it
into the core's LinkedProgram snapshot.

Symbols may appear inline or as references of the form
``["symbol", "<id>"]`` into the document's top-level ``symbols`` table.
"""

import logging
from pathlib import PurePosixPath
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from docrun.core.errors import ProgramLoadError
from docrun.core.models import (
    CustomTag,
    Documentation,
    LinkedProgram,
    LinkedSourceFile,
    LinkedSymbol,
    PackageInfo,
)

logger = logging.getLogger(__name__)

SymbolRef: TypeAlias = tuple[Literal["symbol"], str]

_SOURCE_EXTENSIONS = (".d.ts", ".tsx", ".ts", ".jsx", ".mjs", ".cjs", ".js")


def render_inline_tag(fragment: Any) -> str | None:
    """Render an inline tag object (``{"tagName": "link", "content": [...]}``)
    as ``{@link ...}``; None for anything else."""
    if not isinstance(fragment, dict):
        return None
    tag_name = fragment.get("tagName")
    content = fragment.get("content", [])
    if isinstance(content, str):
        content = [content]
    if not isinstance(tag_name, str) or not isinstance(content, list):
        return None
    if not all(isinstance(part, str) for part in content):
        return None
    text = "".join(content)
    return f"{{@{tag_name} {text}}}" if text else f"{{@{tag_name}}}"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CustomTagModel(_Model):
    tag_name: str = Field(alias="tagName")
    content: list[str] | None = None

    @field_validator("content", mode="before")
    @classmethod
    def normalize_fragments(cls, v: Any) -> Any:
        """Normalize content to a list of text fragments.

        A single string becomes a one-fragment list and inline tags such
        as ``{@link sum}`` are rendered back to their source text. Content
        with any other kind of fragment is treated as absent, so only that
        tag is dropped.
        """
        if isinstance(v, str):
            return [v]
        if not isinstance(v, list):
            return v

        fragments: list[str] = []
        for fragment in v:
            if isinstance(fragment, str):
                fragments.append(fragment)
                continue
            rendered = render_inline_tag(fragment)
            if rendered is None:
                logger.warning(f"Ignoring tag content with unsupported fragment: {fragment!r}")
                return None
            fragments.append(rendered)
        return fragments


class DocumentationModel(_Model):
    custom_tags: list[CustomTagModel] | None = Field(default=None, alias="customTags")


class SymbolModel(_Model):
    name: str = ""
    documentation: DocumentationModel | None = None
    exports: dict[str, "SymbolRef | SymbolModel"] | None = None


SymbolModel.model_rebuild()


class SourceFileModel(_Model):
    module_name: str | None = Field(default=None, alias="moduleName")
    path: str | None = None
    symbol: SymbolRef | SymbolModel | None = None


class LinkedDocumentModel(_Model):
    source_files: dict[str, SourceFileModel | None] = Field(alias="sourceFiles")
    symbols: dict[str, SymbolModel] = Field(default_factory=dict)


def module_name_for(file_key: str, package: PackageInfo) -> str:
    """Derive a module name for a file the linker left unnamed.

    The package's main file maps to the package name; anything else to
    ``<package name>/<path without extension>``.
    """
    def strip_extension(p: str) -> str:
        for ext in _SOURCE_EXTENSIONS:
            if p.endswith(ext):
                return p[: -len(ext)]
        return p

    relative = PurePosixPath(file_key.replace("\\", "/"))
    package_root = PurePosixPath(package.path.replace("\\", "/"))
    if relative.is_absolute() and relative.is_relative_to(package_root):
        relative = relative.relative_to(package_root)

    stem = strip_extension(relative.as_posix()).removeprefix("./")
    main = strip_extension(package.main.replace("\\", "/")).removeprefix("./")
    if not package.name:
        return stem
    if stem == main:
        return package.name
    return f"{package.name}/{stem}"


class _SymbolResolver:
    """Resolves symbol references against a document's symbol table."""

    def __init__(self, symbols: dict[str, SymbolModel]):
        self.symbols = symbols
        self._resolved: dict[str, LinkedSymbol] = {}
        self._in_progress: set[str] = set()

    def resolve(self, ref: SymbolRef | SymbolModel) -> LinkedSymbol:
        if isinstance(ref, SymbolModel):
            return self._convert(ref)

        _, symbol_id = ref
        if symbol_id in self._resolved:
            return self._resolved[symbol_id]
        model = self.symbols.get(symbol_id)
        if model is None:
            raise ProgramLoadError(f"Linked data references unknown symbol {symbol_id!r}")

        if symbol_id in self._in_progress:
            # Cyclic re-export; the export table is not needed past this point
            return self._convert(model, with_exports=False)

        self._in_progress.add(symbol_id)
        try:
            symbol = self._convert(model)
        finally:
            self._in_progress.discard(symbol_id)
        self._resolved[symbol_id] = symbol
        return symbol

    def _convert(self, model: SymbolModel, with_exports: bool = True) -> LinkedSymbol:
        documentation = None
        if model.documentation is not None:
            custom_tags = None
            if model.documentation.custom_tags is not None:
                custom_tags = tuple(
                    CustomTag(
                        tag_name=tag.tag_name,
                        content=tuple(tag.content) if tag.content is not None else None,
                    )
                    for tag in model.documentation.custom_tags
                )
            documentation = Documentation(custom_tags=custom_tags)

        exports = None
        if with_exports and model.exports is not None:
            exports = {name: self.resolve(ref) for name, ref in model.exports.items()}

        return LinkedSymbol(name=model.name, documentation=documentation, exports=exports)


def parse_linked_document(data: Any, package: PackageInfo) -> LinkedProgram:
    """Validate a linked document and convert it to a LinkedProgram.

    Raises:
        ProgramLoadError: If the document does not have the expected shape
            or references unknown symbols.
    """
    try:
        document = LinkedDocumentModel.model_validate(data)
    except ValidationError as e:
        raise ProgramLoadError(f"Invalid linked documentation data: {e}") from e

    resolver = _SymbolResolver(document.symbols)
    source_files: dict[str, LinkedSourceFile | None] = {}
    for key, file_model in document.source_files.items():
        if file_model is None:
            source_files[key] = None
            continue
        module_name = file_model.module_name or module_name_for(
            file_model.path or key, package
        )
        symbol = resolver.resolve(file_model.symbol) if file_model.symbol is not None else None
        source_files[key] = LinkedSourceFile(module_name=module_name, symbol=symbol)

    logger.debug(
        f"Parsed linked data: {len(source_files)} source files, "
        f"{len(document.symbols)} symbols"
    )
    return LinkedProgram(source_files=source_files)
