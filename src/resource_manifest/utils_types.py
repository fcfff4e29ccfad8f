# src/resource_manifest/utils_types.py

import types
from typing import Any, Literal, TypeVar, Union, cast, get_args, get_origin

from typing_extensions import get_type_hints

T = TypeVar("T")


def cast_hint(typ: type[T] | Any, value: Any) -> T:
    """Explicit cast used to narrow loosely typed config data.

    Same as typing.cast but reads left-to-right like a constructor.
    """
    return cast("T", value)


def schema_from_typeddict(td: type[Any]) -> dict[str, Any]:
    """Return field name → type for a TypedDict, resolving string annotations."""
    return dict(get_type_hints(td))


def _is_typeddict(tp: Any) -> bool:
    return (
        isinstance(tp, type)
        and hasattr(tp, "__annotations__")
        and hasattr(tp, "__total__")
    )


def safe_isinstance(value: Any, expected_type: Any) -> bool:  # noqa: PLR0911
    """isinstance() that understands the typing constructs used in our schemas.

    Supports Any, unions, Literal, list[...], dict[..., ...] and TypedDicts
    (checked shallowly as dicts).
    """
    if expected_type is Any:
        return True

    origin = get_origin(expected_type)
    args = get_args(expected_type)

    if origin is Union or origin is types.UnionType:
        return any(safe_isinstance(value, a) for a in args)

    if origin is Literal:
        return value in args

    if origin is list:
        if not isinstance(value, list):
            return False
        subtype = args[0] if args else Any
        return all(safe_isinstance(v, subtype) for v in value)

    if origin is dict:
        if not isinstance(value, dict):
            return False
        key_t, val_t = args if args else (Any, Any)
        return all(
            safe_isinstance(k, key_t) and safe_isinstance(v, val_t)
            for k, v in value.items()
        )

    if _is_typeddict(expected_type):
        return isinstance(value, dict)

    if expected_type is type(None) or expected_type is None:
        return value is None

    if isinstance(expected_type, type):
        # bool is an int subclass; don't let True pass as a number
        if expected_type in (int, float) and isinstance(value, bool):
            return False
        if expected_type is float and isinstance(value, int):
            return True
        return isinstance(value, expected_type)

    return False
