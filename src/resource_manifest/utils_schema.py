# src/resource_manifest/utils_schema.py

"""TypedDict-driven validation of raw config mappings.

Findings land in a ValidationSummary in one of three buckets:

- ``errors``: wrong types and malformed structure, always fatal
- ``strict_warnings``: warnings raised while strict, fatal
- ``warnings``: warnings raised while lenient
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import Any, cast, get_args, get_origin

from .constants import DEFAULT_HINT_CUTOFF
from .utils import plural
from .utils_types import safe_isinstance, schema_from_typeddict


@dataclass
class ValidationSummary:
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    strict_warnings: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    strict: bool = False  # strict anywhere in the config

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    def warn(self, msg: str, *, strict: bool) -> None:
        (self.strict_warnings if strict else self.warnings).append(msg)

    def finish(self) -> ValidationSummary:
        self.valid = not self.errors and not self.strict_warnings
        return self


@dataclass
class _Notice:
    msg: str
    keys: set[str] = field(default_factory=set)
    contexts: list[str] = field(default_factory=list)


class KeyNotices:
    """Collects repeated "known bad key" findings into one message per kind.

    ``msg`` templates take ``{keys}`` and ``{ctx}``; contexts are joined, so
    the same problem in three builds yields a single line.
    """

    def __init__(self) -> None:
        self._notices: dict[tuple[str, bool], _Notice] = {}

    def flag(
        self,
        tag: str,
        bad_keys: set[str],
        cfg: dict[str, Any],
        context: str,
        msg: str,
        *,
        strict: bool,
    ) -> set[str]:
        """Record which of ``bad_keys`` appear in ``cfg`` (case-insensitively).

        Returns the matching keys as spelled in ``cfg``.
        """
        wanted = {k.lower() for k in bad_keys}
        found = {k for k in cfg if k.lower() in wanted}
        if found:
            notice = self._notices.setdefault((tag, strict), _Notice(msg))
            notice.keys |= found
            notice.contexts.append(context)
        return found

    def flush(self, summary: ValidationSummary) -> None:
        for (_, strict), notice in self._notices.items():
            contexts = ", ".join(_strip_preposition(c) for c in notice.contexts)
            keys = ", ".join(sorted(notice.keys))
            rendered = notice.msg.format(keys=keys, ctx=f"in {contexts}")
            summary.warn(rendered, strict=strict)
        self._notices.clear()


def _strip_preposition(ctx: str) -> str:
    ctx = ctx.strip()
    head, _, rest = ctx.partition(" ")
    return rest if head.lower() in {"in", "on"} and rest else ctx


# ---------------------------------------------------------------------------
# value checks
# ---------------------------------------------------------------------------


def _is_typed_dict(tp: Any) -> bool:
    return (
        isinstance(tp, type)
        and hasattr(tp, "__annotations__")
        and hasattr(tp, "__total__")
    )


def _type_label(tp: Any) -> str:
    """Readable name of a schema type, e.g. ``dict[str, list[str]]``."""
    args = get_args(tp)
    if get_origin(tp) is list and args:
        return f"list[{_type_label(args[0])}]"
    if get_origin(tp) is dict and len(args) == 2:  # noqa: PLR2004
        return f"dict[{_type_label(args[0])}, {_type_label(args[1])}]"
    return tp.__name__ if isinstance(tp, type) else str(tp)


def _check_value(
    summary: ValidationSummary,
    context: str,
    key: str,
    val: Any,
    expected: Any,
    *,
    strict: bool,
) -> bool:
    """Check one value against its schema type, recursing into lists and TypedDicts."""
    if _is_typed_dict(expected):
        return check_typed_dict(
            summary, f"{context}.{key}", val, expected, strict=strict
        )

    if get_origin(expected) is list:
        if not isinstance(val, list):
            summary.error(
                f"{context}: key `{key}` expected {_type_label(expected)},"
                f" got {type(val).__name__}"
            )
            return False
        (subtype,) = get_args(expected) or (Any,)
        ok = True
        for i, item in enumerate(cast("list[Any]", val)):
            if _is_typed_dict(subtype) and not isinstance(item, dict):
                summary.error(
                    f"{context}: key `{key}` #{i + 1} expected an object with"
                    f" named keys for {subtype.__name__}, got {type(item).__name__}"
                )
                ok = False
            elif _is_typed_dict(subtype):
                ok &= check_typed_dict(
                    summary, f"{context}.{key}[{i}]", item, subtype, strict=strict
                )
            else:
                ok &= _check_value(
                    summary, context, f"{key}[{i}]", item, subtype, strict=strict
                )
        return ok

    if safe_isinstance(val, expected):
        return True
    summary.error(
        f"{context}: key `{key}` expected {_type_label(expected)},"
        f" got {type(val).__name__}"
    )
    return False


def check_mapping(
    summary: ValidationSummary,
    cfg: dict[str, Any],
    schema: dict[str, Any],
    context: str,
    *,
    strict: bool,
    skip: set[str] | frozenset[str] = frozenset(),
) -> bool:
    """Type-check the keys of ``cfg`` that ``schema`` knows; report the others.

    Keys in ``skip`` are neither checked nor reported. Unknown keys come with
    a close-match hint and only fail the check when ``strict``.
    """
    ok = True
    for key, expected in schema.items():
        if key in cfg and key not in skip:
            ok &= _check_value(
                summary, context, key, cfg[key], expected, strict=strict
            )

    unknown = [k for k in cfg if k not in schema and k not in skip]
    if not unknown:
        return ok

    joined = ", ".join(f"`{k}`" for k in unknown)
    msg = f"Unknown key{plural(unknown)} {joined} {context}."
    hints = [
        f"'{k}' → '{match[0]}'"
        for k in unknown
        if (match := get_close_matches(k, schema, n=1, cutoff=DEFAULT_HINT_CUTOFF))
    ]
    if hints:
        msg += f"\nHint: did you mean {', '.join(hints)}?"
    summary.warn(msg, strict=strict)
    return ok and not strict


def check_typed_dict(
    summary: ValidationSummary,
    context: str,
    val: Any,
    typed_dict: type[Any],
    *,
    strict: bool,
) -> bool:
    """Check ``val`` against a TypedDict; a non-object is an error."""
    if not isinstance(val, dict):
        summary.error(
            f"{context}: expected an object with named keys for"
            f" {typed_dict.__name__}, got {type(val).__name__}"
        )
        return False
    return check_mapping(
        summary,
        cast("dict[str, Any]", val),
        schema_from_typeddict(typed_dict),
        context,
        strict=strict,
    )
