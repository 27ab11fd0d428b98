from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from typing_extensions import Self, get_protocol_members, is_protocol

from autowire.exceptions import InvalidRegistryValueError, UnmetDependencyError
from autowire.policies import MissingMethodPolicy
from autowire.reflection import CONSTRUCTOR_NAME, ParameterDescriptor, TypeReflector
from autowire.registry import SupportsRegistry

logger = logging.getLogger(__name__)

_OMITTED = object()


@dataclass(frozen=True, slots=True)
class _RegistryMatch:
    value: Any


@dataclass(frozen=True, slots=True)
class ResolvedCall:
    """Resolved arguments split the way the reflected member is called."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


class Resolver:
    """Fill a member's parameter list from an ordered chain of registries.

    For each parameter, in declaration order, the first registry that reports
    membership for the parameter type supplies the value. Call-scoped extra
    registries are searched before the base registries. Without a match, a
    nullable parameter receives ``None``, a defaulted parameter is omitted, and
    anything else fails with ``UnmetDependencyError``.

    Registries are only read. Resolution is not recursive: resolved instances
    are injected as stored.
    """

    def __init__(
        self,
        registries: Iterable[SupportsRegistry] = (),
        *,
        on_missing_method: MissingMethodPolicy = MissingMethodPolicy.FAIL,
        reflector: TypeReflector | None = None,
    ) -> None:
        """Initialize a resolver with a base registry chain.

        Args:
            registries: Base registries, searched in the given order.
            on_missing_method: What to do when the reflected member does not
                exist on the target.
            reflector: Parameter reflector, defaults to ``TypeReflector()``.

        """
        self._registries: list[SupportsRegistry] = list(registries)
        self.on_missing_method = on_missing_method
        self.reflector = reflector or TypeReflector()

    @property
    def registries(self) -> tuple[SupportsRegistry, ...]:
        return tuple(self._registries)

    def add_registry(self, registry: SupportsRegistry) -> Self:
        """Append a registry to the end of the base chain."""
        self._registries.append(registry)
        return self

    def list_dependencies(
        self,
        target: Any,
        member_name: str = CONSTRUCTOR_NAME,
    ) -> list[ParameterDescriptor]:
        """Return the reflected parameters of ``target.member_name`` unresolved.

        Args:
            target: Class, instance, or function-like value to reflect.
            member_name: Member to reflect. Ignored for function-like targets.

        """
        return self.reflector.describe_parameters(target, member_name)

    def resolve_dependencies(
        self,
        target: Any,
        member_name: str | None = CONSTRUCTOR_NAME,
        extra: Sequence[SupportsRegistry] = (),
    ) -> list[Any]:
        """Return resolved argument values in parameter order.

        Trailing parameters that fall back to their defaults are left out. A
        defaulted parameter followed by a resolved one is filled with its
        declared default so later values keep their positions.

        Args:
            target: Class, instance, or function-like value to resolve for.
            member_name: Member whose parameters are resolved. ``None`` means
                there is nothing to reflect and yields an empty list.
            extra: Call-scoped registries searched before the base chain.

        Raises:
            ReflectionError: If the member cannot be reflected.
            UnmetDependencyError: If a required parameter has no registry match.
            InvalidRegistryValueError: If a matching registry entry is unusable.

        """
        return [value for _, value in self._resolve(target, member_name, extra)]

    def resolve_call(
        self,
        target: Any,
        member_name: str | None = CONSTRUCTOR_NAME,
        extra: Sequence[SupportsRegistry] = (),
    ) -> ResolvedCall:
        """Resolve dependencies and split them into positional and keyword arguments.

        Keyword-only parameters are passed by name. Trailing parameters that
        fall back to their defaults are left out, as in ``resolve_dependencies``.

        Args:
            target: Class, instance, or function-like value to resolve for.
            member_name: Member whose parameters are resolved.
            extra: Call-scoped registries searched before the base chain.

        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter, value in self._resolve(target, member_name, extra):
            if parameter.is_keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)
        return ResolvedCall(args=tuple(args), kwargs=kwargs)

    def _resolve(
        self,
        target: Any,
        member_name: str | None,
        extra: Sequence[SupportsRegistry],
    ) -> list[tuple[ParameterDescriptor, Any]]:
        if member_name is None:
            return []
        if (
            self.on_missing_method is MissingMethodPolicy.TREAT_AS_NO_PARAMETERS
            and not self.reflector.is_function_like(target)
            and not self.reflector.has_member(target, member_name)
        ):
            logger.debug(
                "Member %r is missing on %r; resolving with no parameters",
                member_name,
                target,
            )
            return []

        registries = [*extra, *self._registries]
        resolved = [
            (parameter, self._resolve_parameter(parameter, registries))
            for parameter in self.list_dependencies(target, member_name)
        ]
        return self._fill_omissions(resolved)

    def _resolve_parameter(
        self,
        parameter: ParameterDescriptor,
        registries: Sequence[SupportsRegistry],
    ) -> Any:
        match = self._find_in_registries(parameter, registries)
        if match is not None:
            logger.debug("Parameter %r resolved from registry", parameter.name)
            return match.value

        if parameter.allows_null:
            logger.debug("Parameter %r has no registry entry, using None", parameter.name)
            return None

        if parameter.is_optional:
            logger.debug("Parameter %r has no registry entry, using default", parameter.name)
            return _OMITTED

        raise UnmetDependencyError(parameter.dependency_type, parameter.name)

    def _find_in_registries(
        self,
        parameter: ParameterDescriptor,
        registries: Sequence[SupportsRegistry],
    ) -> _RegistryMatch | None:
        dependency_type = parameter.dependency_type
        for registry in registries:
            if not registry.has(dependency_type):
                continue

            value = registry.get(dependency_type)
            if value is None:
                if parameter.allows_null:
                    return _RegistryMatch(None)
                raise InvalidRegistryValueError(dependency_type, value)
            if not self._is_instance(value, dependency_type):
                raise InvalidRegistryValueError(dependency_type, value)
            return _RegistryMatch(value)

        return None

    def _is_instance(self, value: Any, dependency_type: type[Any]) -> bool:
        try:
            return isinstance(value, dependency_type)
        except TypeError:
            # Protocols without @runtime_checkable reject isinstance checks.
            if not is_protocol(dependency_type):
                raise
            return all(hasattr(value, member) for member in get_protocol_members(dependency_type))

    def _fill_omissions(
        self,
        resolved: list[tuple[ParameterDescriptor, Any]],
    ) -> list[tuple[ParameterDescriptor, Any]]:
        while resolved and resolved[-1][1] is _OMITTED:
            resolved.pop()
        return [
            (parameter, parameter.default if value is _OMITTED else value)
            for parameter, value in resolved
        ]


__all__ = ["ResolvedCall", "Resolver"]
