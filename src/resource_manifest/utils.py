# src/resource_manifest/utils.py

import json
import os
import re
import sys
from contextlib import suppress
from pathlib import Path
from typing import Any, TextIO, cast


def should_use_color() -> bool:
    """NO_COLOR disables, FORCE_COLOR enables, otherwise color only on a TTY."""
    if "NO_COLOR" in os.environ:
        return False
    if os.getenv("FORCE_COLOR", "").lower() in {"1", "true", "yes"}:
        return True
    return sys.stdout.isatty()


def get_sys_version_info() -> tuple[int, int, int]:
    return cast("tuple[int, int, int]", tuple(sys.version_info[:3]))


# --- JSONC --------------------------------------------------------------------

# a string literal, or a comma that only precedes a closing bracket
_STRING_OR_TRAILING_COMMA = re.compile(r'"(?:\\.|[^"\\])*"|,(\s*[}\]])')


def _drop_comments(text: str) -> str:
    """Remove //, # and /* */ comments outside of string literals."""
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            if ch == "\\":
                out.append(text[i : i + 2])
                i += 2
                continue
            in_string = ch != '"'
            out.append(ch)
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif ch == "#" or text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end < 0 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end < 0 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def strip_jsonc(text: str) -> str:
    """Remove comments and trailing commas from JSONC text.

    String contents are left alone, so values like "http://x" or
    "**/designtime/*" survive.
    """
    text = _STRING_OR_TRAILING_COMMA.sub(
        lambda m: m.group(0) if m.group(1) is None else m.group(1),
        _drop_comments(text),
    )
    return text.strip()


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load a JSON or JSONC document whose root is an object or a list.

    A file that is empty after stripping comments yields None.
    """
    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)
    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = strip_jsonc(path.read_text(encoding="utf-8"))
    if not text:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004
    return cast("dict[str, Any] | list[Any]", data)


def remove_path_in_error_message(inner_msg: str, path: Path) -> str:
    """Drop mentions of ``path`` (full or bare file name) from an error message.

    "Invalid JSONC syntax in /abs/config.jsonc: Expecting value"
    → "Invalid JSONC syntax: Expecting value"
    """
    msg = inner_msg
    for mention in (str(path), path.name):
        msg = re.sub(rf"(?:\s*\bin\s+)?(['\"]?){re.escape(mention)}\1", "", msg)
    msg = re.sub(r"\s*:\s*", ": ", msg)
    return re.sub(r"\s{2,}", " ", msg).strip(": ").strip()


# --- misc -----------------------------------------------------------------------


def plural(obj: Any) -> str:
    """Return "s" unless ``obj`` (a number or a sized object) counts exactly one."""
    try:
        count = len(obj)
    except TypeError:
        count = obj if isinstance(obj, (int, float)) else 0
    return "" if count == 1 else "s"


def safe_log(msg: str) -> None:
    """Write ``msg`` to the real stderr; never raises."""
    stream = cast("TextIO", sys.__stderr__)
    try:
        print(msg, file=stream)
    except Exception:  # noqa: BLE001
        with suppress(Exception):
            stream.write(f"[INTERNAL] {msg}\n")
