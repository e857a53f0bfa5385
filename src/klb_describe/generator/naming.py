"""Identifier helpers for generated type names."""

import re
from typing import Sequence

PLACEHOLDER_NAME = "ApiObject"

_SPLIT = re.compile(r"[^A-Za-z0-9]+")
_WORD = re.compile(r"[A-Za-z]+")


def pascal_case(text: str | None) -> str:
    """`user_wallet` -> `UserWallet`, `getInfo` -> `GetInfo`."""
    if not text:
        return ""
    return "".join(part[:1].upper() + part[1:] for part in _SPLIT.split(text) if part)


def type_name(path: Sequence[str] | str | None) -> str:
    """Derive a type name from an API path.

    A `:method` suffix on the last segment is ignored, opaque instance
    identifiers (anything not purely alphabetic) are skipped, and only the
    last two remaining segments are combined to keep names short:
    `User/ce8b57ca-8961/Wallet` -> `UserWallet`, `Misc/Debug:testUpload` ->
    `MiscDebug`.
    """
    if isinstance(path, str):
        path = path.split("/")
    segments = [s for s in (path or []) if s]
    if segments and ":" in segments[-1]:
        segments[-1] = segments[-1].split(":", 1)[0]

    words = [s for s in segments if _WORD.fullmatch(s)]
    if not words:
        return PLACEHOLDER_NAME
    return "".join(pascal_case(w) for w in words[-2:])


def member_name(name: str | None) -> str:
    """PascalCase form of a method or procedure name, empty when anonymous."""
    return pascal_case(name)


def strip_parameters(api_path: str) -> str:
    """Drop argument segments (not starting with an uppercase letter) from a path.

    `User/:user/Wallet` -> `User/Wallet`, `Order/ord-123456-12456` -> `Order`.
    A `:method` suffix on a dropped last segment moves to the last kept one:
    `User/usr-123:getProfile` -> `User:getProfile`.
    Used before describing a path, since OPTIONS only knows about classes.
    """
    if not api_path:
        return api_path

    segments = api_path.split("/")
    kept = [s for s in segments if not s or s[0].isupper() and s[0].isascii()]
    last = segments[-1]
    dropped_last = bool(last) and not (last[0].isupper() and last[0].isascii())
    if dropped_last and ":" in last and kept and kept[-1]:
        kept[-1] += last[last.index(":"):]
    return "/".join(kept)
