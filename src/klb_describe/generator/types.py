"""Map KLB column and argument types to TypeScript type expressions."""

from typing import Any

from klb_describe.parser.base import FieldInfo

DATETIME_TYPE = "KlbDateTime"
UNKNOWN_TYPE = "any"
MAP_TYPE = "Record<string, any>"

# Semantic validators whose values always travel as strings.
STRING_VALIDATORS = frozenset({"uuid", "email", "url", "phone", "password", "login", "language"})

TEMPORAL_TYPES = frozenset({"datetime", "timestamp"})

TYPE_MAP = {
    # numeric
    "int": "number",
    "integer": "number",
    "tinyint": "number",
    "smallint": "number",
    "mediumint": "number",
    "bigint": "number",
    "decimal": "number",
    "float": "number",
    "double": "number",
    "number": "number",
    "year": "number",
    # text
    "char": "string",
    "varchar": "string",
    "text": "string",
    "tinytext": "string",
    "mediumtext": "string",
    "longtext": "string",
    "string": "string",
    "blob": "string",  # base64
    "binary": "string",
    "varbinary": "string",
    # date and time
    "datetime": DATETIME_TYPE,
    "timestamp": DATETIME_TYPE,
    "date": "string",
    "time": "string",
    # misc
    "bool": "boolean",
    "boolean": "boolean",
    "json": "any[]",
    "array": "any[]",
    "object": MAP_TYPE,
    "json_object": MAP_TYPE,
}

DATETIME_DECLARATION = [
    "/**",
    " * KLB DateTime object structure",
    " */",
    f"export interface {DATETIME_TYPE} {{",
    "  unix: number;    // Unix timestamp (seconds)",
    "  us: number;      // Microseconds part",
    "  iso: string;     // ISO formatted date string",
    "  tz: string;      // Timezone identifier",
    "  full: string;    // Full timestamp as string (seconds + microseconds)",
    "  unixms: string;  // Unix timestamp with milliseconds as string",
    "}",
]


def is_temporal(source_type: str | None) -> bool:
    return bool(source_type) and source_type.lower() in TEMPORAL_TYPES


def _quote(value: Any) -> str:
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"


def map_type(
    source_type: str | None,
    *,
    validator: str | None = None,
    values: list[Any] | None = None,
    nullable: bool = True,
) -> str:
    """Return the TypeScript type for a KLB type name.

    Unknown or missing type names map to `any`; the API vocabulary grows
    independently of this tool.
    """
    if validator and validator.lower() in STRING_VALIDATORS:
        return "string"

    lowered = (source_type or "").lower()
    if lowered == "enum" and values:
        union = " | ".join(_quote(v) for v in values)
        return f"{union} | null" if nullable else union
    if lowered == "set" and values:
        return "string[]"

    return TYPE_MAP.get(lowered, UNKNOWN_TYPE)


def map_field_type(info: FieldInfo) -> str:
    """Map a table column, honouring its validator, values and nullability."""
    return map_type(info.type, validator=info.validator, values=info.values, nullable=info.null is not False)
