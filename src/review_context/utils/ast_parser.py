"""AST parser utility for JavaScript/TypeScript using tree-sitter."""

from pathlib import Path

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from review_context.models.schemas import (
    ExportRecord,
    FileMeta,
    ImportRecord,
    SymbolDef,
    SymbolKind,
    SymbolPosition,
)

# Initialize language objects
JS_LANGUAGE = Language(tsjs.language())
TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

LANGUAGES: dict[str, Language] = {
    "javascript": JS_LANGUAGE,
    "typescript": TS_LANGUAGE,
    "tsx": TSX_LANGUAGE,
}

EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

MAX_DEFINITION_CHARS = 2000
TRUNCATION_MARKER = "\n/* ...truncated... */"

DECLARATION_KINDS: dict[str, SymbolKind] = {
    "interface_declaration": SymbolKind.INTERFACE,
    "type_alias_declaration": SymbolKind.TYPE_ALIAS,
    "class_declaration": SymbolKind.CLASS,
    "abstract_class_declaration": SymbolKind.CLASS,
    "function_declaration": SymbolKind.FUNCTION,
    "generator_function_declaration": SymbolKind.FUNCTION,
    "enum_declaration": SymbolKind.ENUM,
    "lexical_declaration": SymbolKind.VARIABLE,
    "variable_declaration": SymbolKind.VARIABLE,
}


def get_language_for_file(file_path: str) -> str:
    """Map file extension to tree-sitter language name.

    Args:
        file_path: Path to the file

    Returns:
        Language name ("javascript", "typescript", "tsx")

    Raises:
        ValueError: If file extension is not supported
    """
    ext = Path(file_path).suffix
    if ext not in EXTENSION_LANGUAGES:
        raise ValueError(f"Unsupported file extension: {ext}")
    return EXTENSION_LANGUAGES[ext]


def get_parser(language: str) -> Parser:
    """Return a tree-sitter Parser for the given language name."""
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language}")
    parser = Parser()
    parser.language = LANGUAGES[language]
    return parser


def parse_source(source_bytes: bytes, file_path: str) -> Tree:
    """Parse source bytes with the grammar matching ``file_path``'s extension."""
    parser = get_parser(get_language_for_file(file_path))
    return parser.parse(source_bytes)


def parse_file(file_path: str) -> tuple[Tree, bytes]:
    """Read file as bytes, determine language, parse with tree-sitter.

    Raises:
        FileNotFoundError: If file does not exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    source_bytes = path.read_bytes()
    return parse_source(source_bytes, file_path), source_bytes


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _string_value(node: Node | None) -> str:
    # Remove quotes from string literal
    return _text(node).strip("'\"`")


def _declaration_name(node: Node) -> str | None:
    name_node = node.child_by_field_name("name")
    if name_node is not None:
        return _text(name_node)
    if node.type in ("lexical_declaration", "variable_declaration"):
        for child in node.named_children:
            if child.type == "variable_declarator":
                declarator_name = child.child_by_field_name("name")
                if declarator_name is not None and declarator_name.type == "identifier":
                    return _text(declarator_name)
                return None
    return None


def _position(node: Node) -> SymbolPosition:
    return SymbolPosition(line=node.start_point[0] + 1, column=node.start_point[1] + 1)


def _make_definition(node: Node, file_path: str, exported: bool) -> SymbolDef | None:
    kind = DECLARATION_KINDS.get(node.type)
    if kind is None:
        return None
    name = _declaration_name(node)
    if not name:
        return None

    text = _text(node)
    if len(text) > MAX_DEFINITION_CHARS:
        text = text[:MAX_DEFINITION_CHARS] + TRUNCATION_MARKER

    return SymbolDef(
        file_path=file_path,
        name=name,
        kind=kind,
        exported=exported,
        text=text,
        pos=_position(node),
    )


def _import_names(import_node: Node) -> list[str]:
    names: list[str] = []
    for clause in import_node.named_children:
        if clause.type != "import_clause":
            continue
        for child in clause.named_children:
            if child.type == "identifier":
                names.append(f"default as {_text(child)}")
            elif child.type == "namespace_import":
                for part in child.named_children:
                    if part.type == "identifier":
                        names.append(f"* as {_text(part)}")
            elif child.type == "named_imports":
                for specifier in child.named_children:
                    if specifier.type == "import_specifier":
                        imported = specifier.child_by_field_name("name")
                        if imported is not None:
                            names.append(_string_value(imported))
    return names


def _export_specifiers(export_node: Node) -> list[tuple[str, str, Node]]:
    """Return (local name, exported name, node) for each export specifier."""
    specifiers = []
    for child in export_node.named_children:
        if child.type == "export_clause":
            for specifier in child.named_children:
                if specifier.type != "export_specifier":
                    continue
                local = _string_value(specifier.child_by_field_name("name"))
                alias = specifier.child_by_field_name("alias")
                exported = _string_value(alias) if alias is not None else local
                if local:
                    specifiers.append((local, exported, specifier))
        elif child.type == "namespace_export":
            for part in child.named_children:
                if part.type in ("identifier", "string"):
                    name = _string_value(part)
                    specifiers.append((name, name, part))
    return specifiers


def analyze_tree(tree: Tree, file_path: str) -> tuple[list[SymbolDef], FileMeta]:
    """Extract top-level definitions, imports and exports in one pass.

    Definitions follow source order. Declarations under ``export`` are
    marked exported; ``export { a as b }`` marks an earlier local ``a`` as
    exported under ``b``, and names that are not declared locally (or are
    re-exported from another module) get a placeholder ``variable``
    definition with empty text.

    Args:
        tree: Parsed tree-sitter Tree
        file_path: Repository-relative path recorded on each definition

    Returns:
        Tuple of (definitions, file metadata)
    """
    definitions: list[SymbolDef] = []
    meta = FileMeta()

    for node in tree.root_node.named_children:
        if node.type == "import_statement":
            source = node.child_by_field_name("source")
            if source is not None and _string_value(source):
                meta.imports.append(ImportRecord(
                    source=_string_value(source),
                    imported_names=_import_names(node),
                ))
            continue

        if node.type == "export_statement":
            declaration = node.child_by_field_name("declaration")
            value = node.child_by_field_name("value")
            source = node.child_by_field_name("source")

            if declaration is not None:
                definition = _make_definition(declaration, file_path, exported=True)
                if definition is not None:
                    definitions.append(definition)
                    meta.exports.append(ExportRecord(name=definition.name, kind=definition.kind))
                continue

            if value is not None:
                # export default someIdentifier;
                if value.type == "identifier":
                    name = _text(value)
                    local = next((d for d in definitions if d.name == name), None)
                    if local is not None:
                        local.exported = True
                        meta.exports.append(ExportRecord(name=name, kind=local.kind))
                    else:
                        definitions.append(SymbolDef(
                            file_path=file_path,
                            name=name,
                            kind=SymbolKind.VARIABLE,
                            exported=True,
                            pos=_position(value),
                        ))
                        meta.exports.append(ExportRecord(name=name, kind=SymbolKind.VARIABLE))
                continue

            specifiers = _export_specifiers(node)
            if source is not None and _string_value(source):
                names = [local for local, _, _ in specifiers] or ["*"]
                meta.imports.append(ImportRecord(
                    source=_string_value(source),
                    imported_names=names,
                    is_reexport=True,
                ))

            for local_name, exported_name, spec_node in specifiers:
                local = None
                if source is None:
                    local = next((d for d in definitions if d.name == local_name), None)
                if local is not None:
                    local.exported = True
                    meta.exports.append(ExportRecord(name=exported_name, kind=local.kind))
                    continue
                definitions.append(SymbolDef(
                    file_path=file_path,
                    name=exported_name,
                    kind=SymbolKind.VARIABLE,
                    exported=True,
                    pos=_position(spec_node),
                ))
                meta.exports.append(ExportRecord(name=exported_name, kind=SymbolKind.VARIABLE))
            continue

        definition = _make_definition(node, file_path, exported=False)
        if definition is not None:
            definitions.append(definition)

    return definitions, meta
