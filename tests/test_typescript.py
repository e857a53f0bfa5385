import json
from pathlib import Path

from klb_describe.generator.style import LineBuffer, RenderOptions
from klb_describe.generator.typescript import emit_typescript, infer_arg_type, typescript_lines, uses_datetime
from klb_describe.parser.base import ArgInfo
from klb_describe.parser.description import parse_description

FIXTURES = Path(__file__).parent / "fixtures"


def _load(name: str) -> dict:
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


def _lines(payload: dict) -> list[str]:
    return typescript_lines(parse_description(payload))


def _block(lines: list[str], opening: str) -> list[str]:
    start = lines.index(opening)
    end = lines.index("}", start)
    return lines[start + 1 : end]


class TestSimpleResource:
    PAYLOAD = {
        "data": {
            "Path": ["User"],
            "table": {
                "Name": "User",
                "Struct": {
                    "id": {"type": "char", "validator": "uuid", "null": False, "key": "PRIMARY"},
                    "name": {"type": "varchar", "null": True},
                },
            },
        }
    }

    def test_interface(self):
        lines = _lines(self.PAYLOAD)
        assert _block(lines, "export interface IUser {") == [
            "  id: string; // Primary key; uuid",
            "  name?: string;",
        ]

    def test_id_type(self):
        assert "export type IUserID = string;" in _lines(self.PAYLOAD)

    def test_no_datetime_declaration(self):
        assert not any("KlbDateTime" in line for line in _lines(self.PAYLOAD))


class TestUserResource:
    def test_datetime_declared_once(self):
        lines = _lines(_load("user_options.json"))
        assert lines.count("export interface KlbDateTime {") == 1
        assert lines.index("export interface KlbDateTime {") < lines.index("export interface IUser {")

    def test_one_property_per_column(self):
        body = _block(_lines(_load("user_options.json")), "export interface IUser {")
        assert len([line for line in body if "(auto-generated)" not in line]) == 7

    def test_columns(self):
        body = _block(_lines(_load("user_options.json")), "export interface IUser {")
        assert "  User__: string; // User identifier; Primary key; Foreign key to `User`; uuid; size: 36" in body
        assert "  Email: string; // email; size: 255" in body
        assert "  Status: 'valid' | 'banned'; // values: valid, banned; default: \"valid\"" in body
        assert "  Role?: 'user' | 'admin' | null; // values: user, admin" in body
        assert "  Created: KlbDateTime;" in body
        assert "  Last_Login?: KlbDateTime;" in body

    def test_translated_companion(self):
        body = _block(_lines(_load("user_options.json")), "export interface IUser {")
        i = next(n for n, line in enumerate(body) if line.startswith("  Name_Text__?: string;"))
        assert body[i + 1] == "  Name?: string; // Translated text for Name_Text__ (auto-generated)"

    def test_companion_skipped_when_column_exists(self):
        payload = {"data": {"Path": ["Page"], "table": {"Struct": {
            "Title_Text__": {"type": "char"},
            "Title": {"type": "varchar"},
        }}}}
        assert not any("auto-generated" in line for line in _lines(payload))

    def test_methods(self):
        lines = _lines(_load("user_options.json"))
        assert _block(lines, "export interface IUserGetProfileParams {") == []
        assert _block(lines, "export interface IUserGetProfileResponse {") == ["  data: any; // Return type: object"]
        assert _block(lines, "export interface IUserRegisterParams {") == [
            "  email: string; // Email address",
            "  page?: number;",
        ]
        assert " * Request parameters for IUser.register method (static)" in lines

    def test_output_order(self):
        lines = _lines(_load("user_options.json"))
        order = [
            lines.index("export interface KlbDateTime {"),
            lines.index("export interface IUser {"),
            lines.index("export type IUserID = string;"),
            lines.index("export interface IUserGetProfileParams {"),
            lines.index("export interface IUserRegisterParams {"),
        ]
        assert order == sorted(order)


class TestOtherShapes:
    def test_procedure(self):
        lines = _lines(_load("procedure_options.json"))
        assert _block(lines, "export interface IOrderRefundParams {") == ["  amount: number; // Amount to refund"]
        assert " * Request parameters for refund procedure" in lines
        assert " * @returns Refund receipt" in lines
        assert not any("Response {" in line for line in lines)

    def test_composite_id(self):
        payload = {"data": {"Path": ["Link"], "table": {"Struct": {
            "a": {"type": "int", "null": False},
            "b": {"type": "char", "null": False},
            "_primary": ["a", "b"],
        }}}}
        assert _block(_lines(payload), "export interface ILinkID {") == ["  a: number;", "  b: string;"]

    def test_quoted_property_name(self):
        payload = {"data": {"Path": ["Misc"], "table": {"Struct": {"x-y": {}}}}}
        assert "  'x-y'?: any;" in _lines(payload)

    def test_placeholder_name(self):
        payload = {"data": {"procedure": {"name": "ping"}}}
        assert "export interface IApiObjectPingParams {" in _lines(payload)

    def test_datetime_argument(self):
        payload = {"data": {"Path": ["Event"], "procedure": {"name": "at", "args": [{"name": "when", "type": "datetime"}]}}}
        doc = parse_description(payload)
        assert uses_datetime(doc)
        assert "  when?: KlbDateTime;" in typescript_lines(doc)


class TestInferArgType:
    def test_heuristics(self):
        assert infer_arg_type(ArgInfo(name="User__")) == "string"
        assert infer_arg_type(ArgInfo(name="order_id")) == "string"
        assert infer_arg_type(ArgInfo(name="new_password")) == "string"
        assert infer_arg_type(ArgInfo(name="limit")) == "number"
        assert infer_arg_type(ArgInfo(name="options")) == "Record<string, any>"
        assert infer_arg_type(ArgInfo(name="is_active")) == "boolean"
        assert infer_arg_type(ArgInfo(name="whatever")) == "any"

    def test_explicit_type_wins(self):
        assert infer_arg_type(ArgInfo(name="limit", type="varchar")) == "string"
        arg = ArgInfo.model_validate({"name": "mode", "type": "enum", "values": ["a", "b"], "null": False})
        assert infer_arg_type(arg) == "'a' | 'b'"


class TestEmitTypescript:
    def _render(self, payload, markdown):
        buffer = LineBuffer()
        emit_typescript(payload, RenderOptions(output=buffer, use_colors=False, markdown=markdown))
        return buffer.lines

    def test_markdown_fence(self):
        lines = self._render(_load("procedure_options.json"), markdown=True)
        assert lines[:3] == ["## TypeScript definitions for: Order", "", "```typescript"]
        assert lines[-1] == "```"

    def test_terminal(self):
        lines = self._render(_load("procedure_options.json"), markdown=False)
        assert lines[0] == "TypeScript definitions for: Order"
        assert "```typescript" not in lines

    def test_missing_data(self):
        assert self._render({}, markdown=True) == ["**Error:** No API data found in response"]
