"""Pydantic data models for the code graph."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SymbolKind(str, Enum):
    INTERFACE = "interface"
    TYPE_ALIAS = "type-alias"
    CLASS = "class"
    FUNCTION = "function"
    ENUM = "enum"
    VARIABLE = "variable"


class SymbolPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int  # 1-based
    column: int  # 1-based


class SymbolDef(BaseModel):
    """A top-level named definition extracted from a source file."""

    model_config = ConfigDict(frozen=False)

    file_path: str  # repository-relative
    name: str
    kind: SymbolKind
    exported: bool = False
    text: str = ""  # source text, possibly truncated
    pos: SymbolPosition = Field(default_factory=lambda: SymbolPosition(line=1, column=1))


class ImportRecord(BaseModel):
    model_config = ConfigDict(frozen=False)

    source: str  # raw module specifier
    imported_names: list[str] = Field(default_factory=list)
    is_reexport: bool = False  # export ... from "source"


class ExportRecord(BaseModel):
    model_config = ConfigDict(frozen=False)

    name: str
    kind: SymbolKind


class FileMeta(BaseModel):
    """Imports and exports of a single file."""

    model_config = ConfigDict(frozen=False)

    imports: list[ImportRecord] = Field(default_factory=list)
    exports: list[ExportRecord] = Field(default_factory=list)


class GraphEdge(BaseModel):
    """A resolved relative import from one repository file to another."""

    model_config = ConfigDict(frozen=True)

    source: str  # importing file
    target: str  # imported file
    module_specifier: str


class CodeGraph(BaseModel):
    model_config = ConfigDict(frozen=False)

    nodes: list[str] = Field(default_factory=list)  # repository-relative paths
    edges: list[GraphEdge] = Field(default_factory=list)

    def degrees(self) -> dict[str, int]:
        """Return in-degree plus out-degree for every node."""
        degree = {node: 0 for node in self.nodes}
        for edge in self.edges:
            degree[edge.source] = degree.get(edge.source, 0) + 1
            degree[edge.target] = degree.get(edge.target, 0) + 1
        return degree

    def neighbors(self, path: str) -> list[str]:
        """Import targets of ``path`` followed by its importers, deduplicated."""
        ordered: list[str] = []
        for edge in self.edges:
            if edge.source == path and edge.target != path and edge.target not in ordered:
                ordered.append(edge.target)
        for edge in self.edges:
            if edge.target == path and edge.source != path and edge.source not in ordered:
                ordered.append(edge.source)
        return ordered


class Hotspot(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    degree: int


class CodeGraphResult(BaseModel):
    """Everything the graph builder produces for one repository snapshot."""

    model_config = ConfigDict(frozen=False)

    repo_path: str
    graph: CodeGraph = Field(default_factory=CodeGraph)
    definitions: dict[str, list[SymbolDef]] = Field(default_factory=dict)
    file_meta: dict[str, FileMeta] = Field(default_factory=dict)
    relevant_definitions: dict[str, list[SymbolDef]] = Field(default_factory=dict)
    hotspots: list[Hotspot] = Field(default_factory=list)
    parse_errors: dict[str, str] = Field(default_factory=dict)
    built_at: datetime = Field(default_factory=datetime.now)

    def definitions_by_file(self) -> dict[str, list[str]]:
        """Symbol names per file, as consumed by the comment verifier."""
        return {
            path: [d.name for d in defs]
            for path, defs in self.definitions.items()
        }
