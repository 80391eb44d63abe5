"""Error helpers with verbose output for failed HTTP calls."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

__all__ = ["verbose", "CallError"]

_CYCLE = "<see cycle>"


def verbose(err: BaseException | None) -> str:
    """Return the most verbose text of ``err`` and every error it was raised from."""
    parts: list[str] = []
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        describe = getattr(err, "verbose", None)
        parts.append(describe() if callable(describe) else str(err))
        err = err.__cause__
    return "".join(parts)


class CallError(Exception):
    """An HTTP call that failed, keeping the request and response for diagnostics."""

    def __init__(self, request: Any, response: Any, err: BaseException) -> None:
        super().__init__(str(err))
        self.request = request
        self.response = response
        self.err = err

    def __str__(self) -> str:
        return str(self.err)

    def verbose(self) -> str:
        """Describe the error together with the request and response."""
        request = _pretty(self.request)
        response = _pretty(self.response, skip=frozenset({"request", "tls"}))
        return f"{self.err}:\nRequest:\n{request}\nResponse:\n{response}"


def _is_zero(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _pretty(value: Any, skip: frozenset[str] = frozenset()) -> str:
    return _render(value, 0, set(), skip)


def _render(value: Any, indent: int, seen: set[int], skip: frozenset[str] = frozenset()) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (bytes, bytearray)):
        return json.dumps(bytes(value).decode("utf-8", errors="replace"))
    if id(value) in seen:
        return _CYCLE

    inner = "  " * (indent + 1)
    outer = "  " * indent
    seen = seen | {id(value)}

    if isinstance(value, Mapping):
        items = [
            f"{inner}{_render(k, indent + 1, seen)}: {_render(v, indent + 1, seen)},"
            for k, v in value.items()
        ]
        return "{}" if not items else "{\n" + "\n".join(items) + f"\n{outer}}}"
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [f"{inner}{_render(v, indent + 1, seen)}," for v in value]
        return "[]" if not items else "[\n" + "\n".join(items) + f"\n{outer}]"
    reader = getattr(value, "read", None)
    if callable(reader):
        try:
            content = reader()
        except Exception:
            return "could not read io.Reader content"
        return _render(content, indent, seen)
    fields = getattr(value, "__dict__", None)
    if fields is None:
        return repr(value)
    items = [
        f"{inner}{name}: {_render(field, indent + 1, seen)},"
        for name, field in fields.items()
        if not name.startswith("_") and name not in skip and not _is_zero(field)
    ]
    return "{}" if not items else "{\n" + "\n".join(items) + f"\n{outer}}}"