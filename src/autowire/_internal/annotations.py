from __future__ import annotations

import types
from typing import Annotated, Any, TypeGuard, Union, get_args, get_origin

_NONE_TYPE = type(None)


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class usable as a registry key.

    Args:
        candidate: Annotation being checked after ``Annotated`` and ``None``
            members have been stripped.

    """
    return (
        isinstance(candidate, type)
        and not isinstance(candidate, types.GenericAlias)
        and candidate is not Any
        and candidate is not _NONE_TYPE
    )


def strip_annotated(annotation: Any) -> Any:
    """Return the inner type of ``Annotated[T, ...]``, or annotation unchanged."""
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def split_nullable(annotation: Any) -> tuple[Any, bool]:
    """Split ``T | None`` into ``(T, True)``.

    Unions with more than one non-None member are returned unchanged (minus
    ``None``) so the caller can reject them.

    Args:
        annotation: Evaluated parameter annotation.

    """
    annotation = strip_annotated(annotation)
    if get_origin(annotation) not in (Union, types.UnionType):
        return annotation, False

    members = [strip_annotated(member) for member in get_args(annotation)]
    non_null = [member for member in members if member is not _NONE_TYPE]
    allows_null = len(non_null) != len(members)
    if len(non_null) == 1:
        return non_null[0], allows_null
    return Union[tuple(non_null)], allows_null  # noqa: UP007


__all__ = ["is_runtime_class", "split_nullable", "strip_annotated"]
