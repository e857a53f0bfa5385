"""Human-readable reports of API description documents."""

from typing import Iterable

from pydantic import ValidationError

from klb_describe.config import DEFAULT_API_PREFIX
from klb_describe.parser.base import (
    ApiDescription,
    ArgInfo,
    FieldInfo,
    PrefixEntry,
    ProcedureSchema,
    TableSchema,
    companion_of,
)
from klb_describe.parser.description import MissingDataError, parse_description, parse_root_objects
from .style import RenderOptions

# (call form, query string form) sample values per argument type
EXAMPLE_VALUES = {
    "bool": ("true", "true"),
    "boolean": ("true", "true"),
    "int": ("123", "123"),
    "integer": ("123", "123"),
    "number": ("123", "123"),
    "float": ("12.34", "12.34"),
    "double": ("12.34", "12.34"),
    "string": ('"value"', "value"),
    "text": ('"value"', "value"),
    "varchar": ('"value"', "value"),
}
DEFAULT_EXAMPLE = ('"..."', "...")


def load_description(payload, options: RenderOptions) -> ApiDescription | None:
    """Parse a response, reporting unusable input as a single error line."""
    try:
        return parse_description(payload)
    except MissingDataError as e:
        options.emit(options.error(str(e)))
    except ValidationError as e:
        options.emit(options.error(f"Malformed API description ({e.error_count()} invalid values)"))
    return None


def _cell(text: str | None) -> str:
    return (text or "").replace("|", "\\|").replace("\n", " ")


def _type_label(type_name: str | None, size=None) -> str:
    if not type_name:
        return ""
    return f"{type_name}[{size}]" if size not in (None, "") else type_name


# -- usage examples -----------------------------------------------------------


def usage_examples(
    doc: ApiDescription, routine: ProcedureSchema, api_prefix: str = DEFAULT_API_PREFIX
) -> tuple[str, str | None]:
    """Return the `klbfw.rest` call and, when GET applies, the URL form."""
    target = f"{doc.path_str}:{routine.name}" if routine.static else f"{doc.path_str}/${{id}}:{routine.name}"
    samples = [(arg.name, EXAMPLE_VALUES.get((arg.type or "").lower(), DEFAULT_EXAMPLE)) for arg in routine.args]

    call_args = ", ".join(f"{name}: {value[0]}" for name, value in samples)
    call = f"klbfw.rest('{target}', 'POST', {{{call_args}}})"

    url = None
    if "GET" in doc.allowed_methods and samples:
        query = "&".join(f"{name}={value[1]}" for name, value in samples)
        url = f"GET {api_prefix}{target}?{query}"
    return call, url


def _write_usage(doc: ApiDescription, routine: ProcedureSchema, options: RenderOptions, indent: str = "") -> None:
    call, url = usage_examples(doc, routine)
    if options.markdown:
        options.fence_open("javascript")
        options.emit(call)
        options.fence_close()
        if url:
            options.fence_open()
            options.emit(url)
            options.fence_close()
        return

    if not indent:
        options.emit(options.muted("# JavaScript"))
    options.emit(indent + call)
    if url:
        if not indent:
            options.emit("")
            options.emit(options.muted("# URL Format"))
        options.emit(indent + url)


# -- shared pieces ------------------------------------------------------------


def _write_args(args: list[ArgInfo], options: RenderOptions, indent: str = "  ") -> None:
    if options.markdown:
        options.emit("| Name | Type | Required | Description |")
        options.emit("| ---- | ---- | -------- | ----------- |")
        for arg in args:
            required = "Yes" if arg.required else "No"
            options.emit(f"| {_cell(arg.name)} | {_cell(arg.type)} | {required} | {_cell(arg.description)} |")
        return

    for arg in args:
        line = f"{indent}{options.style(arg.name, fg='yellow')}"
        if arg.type:
            line += f" ({arg.type})"
        if arg.required:
            line += f" {options.style('*', fg='red')}"
        options.emit(line)
        if arg.description:
            options.emit(f"{indent}  {options.muted(arg.description)}")


def _write_header(doc: ApiDescription, options: RenderOptions) -> None:
    if doc.path:
        if options.markdown:
            options.emit(f"### API: `{doc.path_str}`")
        else:
            options.emit(f"{options.style('API:', fg='green', bold=True)} {options.style(doc.path_str, fg='blue')}")

    if doc.kind:
        options.emit(options.field("Type", doc.kind))
    if doc.type:
        options.emit(options.field("Category", options.code(doc.type)))
    if doc.allowed_methods:
        options.emit(options.field("Methods", ", ".join(options.method(m) for m in doc.allowed_methods)))
    if doc.allowed_methods_object:
        options.emit(options.field("Object Methods", ", ".join(options.method(m) for m in doc.allowed_methods_object)))
    if doc.access:
        options.emit(options.field("Access", doc.access))

    if doc.description:
        options.emit("")
        options.emit(options.heading("Description", 4))
        options.emit(options.muted(doc.description))


# -- sections -----------------------------------------------------------------


def _write_procedure(doc: ApiDescription, procedure: ProcedureSchema, options: RenderOptions) -> None:
    options.emit("")
    options.emit(options.heading("Procedure Details"))
    options.emit(options.field("Name", options.code(procedure.name)))
    options.emit(options.field("Type", "Static Method" if procedure.static else "Instance Method"))

    if procedure.description:
        options.emit("")
        options.emit(options.heading("Description", 4))
        options.emit(options.muted(procedure.description))

    if doc.path:
        options.emit("")
        options.emit(options.heading("Usage", 4))
        _write_usage(doc, procedure, options)

    options.emit("")
    if procedure.args:
        options.emit(options.heading("Arguments", 4))
        _write_args(procedure.args, options)
    else:
        options.emit(options.muted("No arguments required"))

    if procedure.return_description:
        options.emit("")
        options.emit(options.heading("Returns", 4))
        options.emit(options.muted(procedure.return_description))


def _field_notes(name: str, info: FieldInfo, options: RenderOptions) -> list[str]:
    notes = []
    if info.description:
        notes.append(info.description)
    base = companion_of(name)
    if base:
        notes.append(f"Translatable ID; resolved text is returned in {options.code(base)}")
    return notes


def _index_summary(table: TableSchema) -> str:
    parts = []
    for name, target in table.indexes.items():
        if isinstance(target, list):
            cols = ", ".join(str(c) for c in target)
            label = f"{name[1:]} ({cols}) unique" if name.startswith("@") else f"{name} ({cols})"
        else:
            label = f"{name} {target}"
        parts.append(label)
    return "; ".join(parts)


def _write_table(table: TableSchema, options: RenderOptions) -> None:
    options.emit("")
    options.emit(options.heading("Resource Details"))
    options.emit(options.field("Name", table.name))
    options.emit(options.field("Fields", f"{len(table.columns)} fields"))
    if table.primary_columns:
        options.emit(options.field("Primary Key", ", ".join(options.code(c) for c in table.primary_columns)))
    if table.indexes:
        options.emit(options.field("Indexes", _index_summary(table)))

    if not table.columns:
        return
    options.emit("")
    options.emit(options.heading("All Fields", 4))
    if options.markdown:
        options.emit("| Field | Type | Required | Description |")
        options.emit("| ----- | ---- | -------- | ----------- |")
        for name, info in table.columns.items():
            required = "Yes" if info.required else "No"
            notes = "; ".join(_field_notes(name, info, options))
            options.emit(f"| {_cell(name)} | {_cell(_type_label(info.type, info.size))} | {required} | {_cell(notes)} |")
        return

    for name, info in table.columns.items():
        line = f"  {options.style(name, fg='yellow')}"
        label = _type_label(info.type, info.size)
        if label:
            line += f" ({label})"
        if info.required:
            line += f" {options.style('*', fg='red')}"
        options.emit(line)
        for note in _field_notes(name, info, options):
            options.emit(f"    {options.muted(note)}")


def _write_methods(doc: ApiDescription, options: RenderOptions) -> None:
    options.emit("")
    options.emit(options.heading("Available Methods"))

    for func in doc.func:
        if options.markdown:
            options.emit(f"#### `{'static ' if func.static else ''}{func.name}()`")
            if func.description:
                options.emit(func.description)
            if func.args:
                options.emit("")
                options.emit("**Arguments:**")
                options.emit("")
                _write_args(func.args, options)
            if func.return_type:
                options.emit(options.field("Returns", options.code(func.return_type)))
            if func.return_description:
                options.emit(options.field("Return Description", func.return_description))
            if doc.path:
                options.emit("**Usage:**")
                _write_usage(doc, func, options)
            options.emit("")
            continue

        static = " (static)" if func.static else ""
        options.emit(f"  {options.style(func.name, fg='green')}{static}")
        if func.description:
            options.emit(f"    {options.muted(func.description)}")
        if func.args:
            options.emit(f"    {options.style('Arguments:', bold=True)}")
            _write_args(func.args, options, indent="      ")
        if func.return_type:
            options.emit(f"    {options.muted('Returns: ' + func.return_type)}")
        if func.return_description:
            options.emit(f"    {options.muted('Return Description: ' + func.return_description)}")
        if doc.path:
            options.emit(f"    {options.style('Usage:', bold=True)}")
            _write_usage(doc, func, options, indent="    ")
        options.emit("")


def group_by_letter(entries: Iterable[PrefixEntry], sort_within: bool = False) -> list[tuple[str, list[PrefixEntry]]]:
    """Group entries by the uppercased first letter of their name.

    Letters are always ascending. Entries keep their source order unless
    `sort_within` is set, which the root object listing uses.
    """
    groups: dict[str, list[PrefixEntry]] = {}
    for entry in entries:
        letter = entry.name[:1].upper() or "?"
        groups.setdefault(letter, []).append(entry)

    result = []
    for letter in sorted(groups):
        items = groups[letter]
        if sort_within:
            items = sorted(items, key=lambda e: (e.name.lower(), e.name))
        result.append((letter, items))
    return result


def _write_prefixes(doc: ApiDescription, options: RenderOptions) -> None:
    options.emit("")
    options.emit(options.heading("Sub-endpoints"))
    for letter, entries in group_by_letter(doc.prefix):
        names = ", ".join(options.code(options.style(e.name, fg="green")) for e in entries)
        if options.markdown:
            options.emit(f"- **{letter}**: {names}")
        else:
            options.emit(f"  {options.style(letter, bold=True)}: {names}")


# -- entry points -------------------------------------------------------------


def format_description(payload, options: RenderOptions) -> None:
    """Render the full OPTIONS response of an endpoint."""
    doc = load_description(payload, options)
    if doc is None:
        return

    _write_header(doc, options)

    if doc.procedure is not None:
        # procedures are a primary shape of their own
        _write_procedure(doc, doc.procedure, options)
        return

    if doc.table is not None:
        _write_table(doc.table, options)
    if doc.func:
        _write_methods(doc, options)
    if doc.prefix:
        _write_prefixes(doc, options)


def format_root_objects(payload, options: RenderOptions, program: str = "klbfw-describe") -> None:
    """Render the object list returned by OPTIONS on the API root."""
    try:
        entries = parse_root_objects(payload)
    except MissingDataError as e:
        options.emit(options.error(f"{e}."))
        return
    except ValidationError as e:
        options.emit(options.error(f"Malformed API object list ({e.error_count()} invalid values)"))
        return

    options.emit(options.heading("Available API Objects"))
    options.emit("")
    for letter, group in group_by_letter(entries, sort_within=True):
        if options.markdown:
            options.emit(f"#### {letter}")
        else:
            options.emit(f"  {options.style(letter, bold=True)}")
        for entry in group:
            suffix = f" - {options.muted(entry.description)}" if entry.description else ""
            if options.markdown:
                options.emit(f"- `{entry.name}`{suffix}")
            else:
                options.emit(f"    {options.style(entry.name, fg='green')}{suffix}")
        options.emit("")

    options.emit(options.muted("Run with a specific API path to get more details about an object."))
    options.emit(options.muted(f"Example: {program} describe User"))
