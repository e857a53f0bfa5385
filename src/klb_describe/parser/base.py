"""Data models for KLB API description documents.

An OPTIONS request on any endpoint returns a `data` object describing the
endpoint. It is converted into these models before any rendering happens,
so formatters never reach into raw dictionaries.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

# Ordered candidate keys for free text; `desc` is the legacy name.
DESCRIPTION_KEYS = AliasChoices("description", "desc")

TEXT_SUFFIX = "_Text__"
FOREIGN_KEY_SUFFIX = "__"
PRIMARY = "PRIMARY"


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


def companion_of(field_name: str) -> str | None:
    """Return `Foo` for a translatable ID field named `Foo_Text__`."""
    if field_name.endswith(TEXT_SUFFIX) and len(field_name) > len(TEXT_SUFFIX):
        return field_name[: -len(TEXT_SUFFIX)]
    return None


class FieldInfo(BaseModel):
    """A single column of a table structure."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    size: int | str | None = None
    null: bool | None = None  # absent or true means nullable
    validator: str | None = None
    values: list[Any] | None = None  # ENUM / SET members
    default: Any = None
    description: str | None = Field(default=None, validation_alias=DESCRIPTION_KEYS)
    key: str | None = None
    protect: bool | None = None

    @property
    def required(self) -> bool:
        return self.null is False


class TableSchema(BaseModel):
    """Table structure of a resource.

    `Struct` mixes columns with reserved metadata keys; the validator splits
    them so that `columns` only ever holds real fields.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(default="", alias="Name")
    columns: dict[str, FieldInfo] = {}
    primary_key: list[str] = []
    indexes: dict[str, Any] = {}  # name -> "FOREIGN" or field list, "@" prefix = unique

    @model_validator(mode="before")
    @classmethod
    def split_struct(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "Struct" not in data:
            return data
        data = dict(data)
        struct = data.pop("Struct") or {}
        if not isinstance(struct, dict):
            return data

        primary = struct.get("_primary") or []
        if isinstance(primary, str):
            primary = [primary]
        data["columns"] = {k: v for k, v in struct.items() if not k.startswith("_")}
        data["primary_key"] = primary
        data["indexes"] = struct.get("_keys") or {}
        return data

    @property
    def primary_columns(self) -> list[str]:
        """Primary key columns, falling back to fields flagged `key: PRIMARY`."""
        if self.primary_key:
            return list(self.primary_key)
        return [name for name, info in self.columns.items() if info.key == PRIMARY]

    def is_primary(self, field_name: str) -> bool:
        info = self.columns.get(field_name)
        if info is not None and info.key == PRIMARY:
            return True
        return field_name in self.primary_key


class ArgInfo(BaseModel):
    """A single argument of a procedure or method."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    type: str | None = None
    required: bool | None = None
    description: str | None = Field(default=None, validation_alias=DESCRIPTION_KEYS)


class ProcedureSchema(BaseModel):
    """A callable operation bound to a path."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    static: bool | None = None
    args: list[ArgInfo] = []
    description: str | None = Field(default=None, validation_alias=DESCRIPTION_KEYS)
    return_description: str | None = None
    return_type: str | None = None

    @field_validator("args", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return _none_to_list(value)


class MethodSchema(ProcedureSchema):
    """A method listed under `func`; same shape as a procedure."""


class PrefixEntry(BaseModel):
    """A sub-resource reachable below the endpoint."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    methods: list[str] = []
    description: str | None = Field(default=None, validation_alias=DESCRIPTION_KEYS)

    @field_validator("methods", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return _none_to_list(value)


class ApiDescription(BaseModel):
    """The `data` object of an OPTIONS response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    path: list[str] = Field(default=[], alias="Path")
    type: str | None = None
    description: str | None = Field(default=None, validation_alias=DESCRIPTION_KEYS)
    access: str | None = None
    allowed_methods: list[str] = []
    allowed_methods_object: list[str] = []
    prefix: list[PrefixEntry] = []
    table: TableSchema | None = None
    procedure: ProcedureSchema | None = None
    func: list[MethodSchema] = []

    @field_validator("path", "allowed_methods", "allowed_methods_object", "prefix", "func", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return _none_to_list(value)

    # listing keys present with a non-null value, even an empty list
    _listings: frozenset[str] = PrivateAttr(default=frozenset())

    @model_validator(mode="wrap")
    @classmethod
    def remember_listings(cls, data: Any, handler) -> "ApiDescription":
        doc = handler(data)
        if isinstance(data, dict):
            doc._listings = frozenset(k for k in ("prefix", "func") if data.get(k) is not None)
        return doc

    @property
    def path_str(self) -> str:
        return "/".join(self.path)

    @property
    def kind(self) -> str | None:
        """Endpoint kind inferred from the primary shape of the document."""
        if self.procedure is not None:
            return "Procedure"
        if self.table is not None:
            return "Resource"
        if self.prefix or self.func or self._listings:
            return "Collection"
        return None
