from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, get_type_hints

from autowire._internal.annotations import is_runtime_class, split_nullable
from autowire.exceptions import ReflectionError

CONSTRUCTOR_NAME = "__init__"

_MISSING_ANNOTATION = object()
_NON_INJECTABLE_KINDS = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe one injectable parameter of a reflected member.

    Descriptors are produced in declaration order, so a descriptor's position
    in the list is the argument position it fills.
    """

    name: str
    """Parameter name as declared."""
    dependency_type: type[Any]
    """Concrete class used as the registry key for this parameter."""
    allows_null: bool
    """True when ``None`` is an acceptable value (``T | None`` or a ``None`` default)."""
    is_optional: bool
    """True when the parameter declares a default and may be omitted."""
    kind: inspect._ParameterKind = Parameter.POSITIONAL_OR_KEYWORD
    """How the parameter is bound when the member is called."""
    default: Any = Parameter.empty
    """Declared default, or ``inspect.Parameter.empty``."""

    @property
    def type_name(self) -> str:
        return self.dependency_type.__qualname__

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is Parameter.KEYWORD_ONLY


class TypeReflector:
    """Reflect injectable parameters from classes, instances and callables.

    Every injectable parameter must be annotated with exactly one concrete
    class, optionally combined with ``None``. Anything else fails fast with
    ``ReflectionError`` instead of guessing a registry key.
    """

    def describe_parameters(
        self,
        target: Any,
        member_name: str = CONSTRUCTOR_NAME,
    ) -> list[ParameterDescriptor]:
        """Return descriptors for the parameters of ``target.member_name``.

        Plain functions, lambdas, bound methods and ``functools.partial``
        objects are reflected directly and ``member_name`` is ignored.

        Args:
            target: Class, instance, or function-like value to reflect.
            member_name: Name of the member whose parameters are described.

        Raises:
            ReflectionError: If the member is missing or not callable, or a
                parameter annotation is missing, unresolvable, or not a single
                concrete class.

        """
        if self.is_function_like(target):
            member, skip_first_parameter = target, False
        else:
            if self._uses_default_constructor(target, member_name):
                return []
            member, skip_first_parameter = self._reflect_member(target, member_name)

        member_label = self._member_label(target, member_name)
        parameters = self._member_parameters(
            member,
            skip_first_parameter=skip_first_parameter,
            member_label=member_label,
        )
        annotations, annotation_error = self._resolved_type_hints(member)

        return [
            self._describe(
                parameter=parameter,
                annotations=annotations,
                annotation_error=annotation_error,
                member_label=member_label,
            )
            for parameter in parameters
            if parameter.kind not in _NON_INJECTABLE_KINDS
        ]

    def has_member(self, target: Any, member_name: str) -> bool:
        """Return true when target exposes a member with the given name."""
        try:
            inspect.getattr_static(target, member_name)
        except AttributeError:
            return False
        return True

    @staticmethod
    def is_function_like(target: Any) -> bool:
        return inspect.isroutine(target) or isinstance(target, functools.partial)

    def _uses_default_constructor(self, target: Any, member_name: str) -> bool:
        owner = target if inspect.isclass(target) else type(target)
        return member_name == CONSTRUCTOR_NAME and owner.__init__ is object.__init__

    def _reflect_member(self, target: Any, member_name: str) -> tuple[Any, bool]:
        try:
            raw_member = inspect.getattr_static(target, member_name)
        except AttributeError as error:
            msg = f'Method "{member_name}" does not exist in class or object {target!r}'
            raise ReflectionError(msg) from error

        member = getattr(target, member_name)
        if not callable(member):
            msg = f'Member "{member_name}" of {target!r} is not callable'
            raise ReflectionError(msg)

        # Functions looked up on a class are unbound and still carry ``self``.
        skip_first_parameter = inspect.isclass(target) and not isinstance(
            raw_member,
            (staticmethod, classmethod),
        )
        return member, skip_first_parameter

    def _member_parameters(
        self,
        member: Any,
        *,
        skip_first_parameter: bool,
        member_label: str,
    ) -> tuple[Parameter, ...]:
        try:
            parameters = tuple(inspect.signature(member).parameters.values())
        except (TypeError, ValueError) as error:
            msg = f"Could not reflect callable {member_label}: {error}"
            raise ReflectionError(msg) from error
        if skip_first_parameter and parameters:
            return parameters[1:]
        return parameters

    def _resolved_type_hints(self, member: Any) -> tuple[dict[str, Any], Exception | None]:
        try:
            return get_type_hints(member, include_extras=True), None
        except (AttributeError, NameError, TypeError) as error:
            return {}, error

    def _describe(
        self,
        *,
        parameter: Parameter,
        annotations: dict[str, Any],
        annotation_error: Exception | None,
        member_label: str,
    ) -> ParameterDescriptor:
        annotation = annotations.get(parameter.name, _MISSING_ANNOTATION)
        if annotation is _MISSING_ANNOTATION:
            raw_annotation = parameter.annotation
            if raw_annotation is Parameter.empty or isinstance(raw_annotation, str):
                msg = (
                    f"Parameter '{parameter.name}' of {member_label} has no resolvable "
                    "type annotation."
                )
                if annotation_error is None:
                    raise ReflectionError(msg)
                msg = f"{msg} Original annotation error: {annotation_error}"
                raise ReflectionError(msg) from annotation_error
            annotation = raw_annotation

        dependency_type, allows_null = split_nullable(annotation)
        if not is_runtime_class(dependency_type):
            msg = (
                f"Parameter '{parameter.name}' of {member_label} must be annotated with a "
                f"single concrete class, got {annotation!r}."
            )
            raise ReflectionError(msg)

        has_default = parameter.default is not Parameter.empty
        return ParameterDescriptor(
            name=parameter.name,
            dependency_type=dependency_type,
            allows_null=allows_null or (has_default and parameter.default is None),
            is_optional=has_default,
            kind=parameter.kind,
            default=parameter.default,
        )

    def _member_label(self, target: Any, member_name: str) -> str:
        if self.is_function_like(target):
            return getattr(target, "__qualname__", repr(target))
        owner = target if inspect.isclass(target) else type(target)
        return f"'{owner.__qualname__}.{member_name}'"


__all__ = ["CONSTRUCTOR_NAME", "ParameterDescriptor", "TypeReflector"]
