"""TypeScript declarations for API description documents.

Output order is fixed: the shared KlbDateTime declaration (once, when any
field or argument needs it), the resource interface and its ID type, the
procedure parameters, then one parameter/response pair per method.
"""

import json
import re

from klb_describe.parser.base import (
    FOREIGN_KEY_SUFFIX,
    ApiDescription,
    ArgInfo,
    FieldInfo,
    ProcedureSchema,
    TableSchema,
    companion_of,
)
from .description import load_description
from .naming import member_name, type_name
from .style import RenderOptions
from .types import DATETIME_DECLARATION, MAP_TYPE, UNKNOWN_TYPE, is_temporal, map_field_type, map_type

INTERFACE_PREFIX = "I"

_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def _prop(name: str) -> str:
    return name if _IDENTIFIER.fullmatch(name) else "'" + name.replace("'", "\\'") + "'"


def _comment(parts: list[str]) -> str:
    parts = [p.replace("\n", " ").strip() for p in parts if p]
    return f" // {'; '.join(parts)}" if parts else ""


def infer_arg_type(arg: ArgInfo) -> str:
    """Type of a request argument; an explicit `type` always wins."""
    extra = arg.model_extra or {}
    if arg.type:
        return map_type(
            arg.type,
            validator=extra.get("validator"),
            values=extra.get("values"),
            nullable=extra.get("null") is not False,
        )

    name = arg.name.lower()
    if arg.name.endswith(FOREIGN_KEY_SUFFIX):
        return "string"
    if name == "id" or name.endswith("_id"):
        return "string"
    if "password" in name or name in ("email", "status", "type"):
        return "string"
    if name in ("page", "limit", "offset"):
        return "number"
    if name in ("options", "config", "meta"):
        return MAP_TYPE
    if name.startswith(("is_", "has_")):
        return "boolean"
    return UNKNOWN_TYPE


def uses_datetime(doc: ApiDescription) -> bool:
    """True when any column or argument of the document is a date-time."""
    if doc.table is not None and any(is_temporal(info.type) for info in doc.table.columns.values()):
        return True
    routines = ([doc.procedure] if doc.procedure is not None else []) + list(doc.func)
    return any(is_temporal(arg.type) for routine in routines for arg in routine.args)


def field_comment(name: str, info: FieldInfo, table: TableSchema) -> str:
    parts = [info.description]
    if table.is_primary(name):
        parts.append("Primary key")
    if name.endswith(FOREIGN_KEY_SUFFIX) and len(name) > len(FOREIGN_KEY_SUFFIX):
        parts.append(f"Foreign key to `{name[: -len(FOREIGN_KEY_SUFFIX)]}`")
    if info.validator:
        parts.append(info.validator)
    if info.size not in (None, ""):
        parts.append(f"size: {info.size}")
    if info.values:
        parts.append("values: " + ", ".join(str(v) for v in info.values))
    if info.default is not None:
        parts.append(f"default: {json.dumps(info.default, ensure_ascii=False)}")
    return _comment(parts)


class _TypeScriptWriter:
    def __init__(self, doc: ApiDescription):
        self.doc = doc
        self.base = INTERFACE_PREFIX + type_name(doc.path)
        self.lines: list[str] = []

    def add(self, *lines: str) -> None:
        self.lines.extend(lines)

    def doc_block(self, *text: str) -> None:
        self.add("/**", *(f" * {t}" for t in text if t), " */")

    def resource(self, table: TableSchema) -> None:
        name = self.base
        self.doc_block(f"{table.name or name} resource interface")
        self.add(f"export interface {name} {{")
        for field, info in table.columns.items():
            optional = "" if info.null is False else "?"
            self.add(f"  {_prop(field)}{optional}: {map_field_type(info)};{field_comment(field, info, table)}")
            companion = companion_of(field)
            if companion and companion not in table.columns:
                self.add(f"  {_prop(companion)}?: string; // Translated text for {field} (auto-generated)")
        self.add("}", "")

        keys = table.primary_columns
        if len(keys) == 1:
            self.doc_block(f"ID type for {table.name or name}")
            self.add(f"export type {name}ID = {self._key_type(table, keys[0])};", "")
        elif len(keys) > 1:
            self.doc_block(f"Composite ID type for {table.name or name}")
            self.add(f"export interface {name}ID {{")
            self.add(*(f"  {_prop(key)}: {self._key_type(table, key)};" for key in keys))
            self.add("}", "")

    @staticmethod
    def _key_type(table: TableSchema, key: str) -> str:
        info = table.columns.get(key)
        return map_field_type(info) if info is not None else "string"

    def routine(self, routine: ProcedureSchema, kind: str) -> None:
        name = f"{self.base}{member_name(routine.name)}"
        if kind == "procedure":
            title = f"Request parameters for {routine.name or self.base} procedure"
        else:
            title = f"Request parameters for {self.base}.{routine.name} method{' (static)' if routine.static else ''}"
        returns = f"@returns {routine.return_description}" if routine.return_description else ""
        self.doc_block(title, routine.description or "", returns)

        self.add(f"export interface {name}Params {{")
        for arg in routine.args:
            optional = "" if arg.required else "?"
            self.add(f"  {_prop(arg.name)}{optional}: {infer_arg_type(arg)};{_comment([arg.description])}")
        self.add("}", "")

        if routine.return_type:
            self.add(f"export interface {name}Response {{")
            self.add(f"  data: any; // Return type: {routine.return_type}")
            self.add("}", "")

    def build(self) -> list[str]:
        if uses_datetime(self.doc):
            self.add(*DATETIME_DECLARATION, "")
        if self.doc.table is not None:
            self.resource(self.doc.table)
        if self.doc.procedure is not None:
            self.routine(self.doc.procedure, "procedure")
        for func in self.doc.func:
            self.routine(func, "method")
        return self.lines


def typescript_lines(doc: ApiDescription) -> list[str]:
    """All declarations for a document, one source line per item."""
    return _TypeScriptWriter(doc).build()


def emit_typescript(payload, options: RenderOptions) -> None:
    """Render the TypeScript definitions of a full OPTIONS response."""
    doc = load_description(payload, options)
    if doc is None:
        return

    path = doc.path_str or "Unknown"
    if options.markdown:
        options.emit(f"## TypeScript definitions for: {path}")
    else:
        options.emit(f"{options.style('TypeScript definitions for:', fg='blue', bold=True)} {options.style(path, fg='green')}")
    options.emit("")

    options.fence_open("typescript")
    for line in typescript_lines(doc):
        options.emit(line)
    options.fence_close()
