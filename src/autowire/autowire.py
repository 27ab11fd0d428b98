from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar, overload

from typing_extensions import Self

from autowire.exceptions import ReflectionError, TargetNotFoundError
from autowire.policies import MissingMethodPolicy
from autowire.reflection import CONSTRUCTOR_NAME, ParameterDescriptor, TypeReflector
from autowire.registry import SupportsRegistry
from autowire.resolver import Resolver

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Autowire:
    """Autowire constructor dependencies from one or more registries.

    Registries passed at construction time or via ``add_registry`` form the
    base chain. Every resolving call also accepts ``extra`` registries that are
    consulted first for that call only.

    Examples:
        .. code-block:: python

            registry = Registry()
            registry.set(Database, Database("sqlite://"))

            autowire = Autowire([registry])
            service = autowire.instantiate(UserService)

    """

    def __init__(
        self,
        registries: Iterable[SupportsRegistry] = (),
        *,
        on_missing_method: MissingMethodPolicy = MissingMethodPolicy.FAIL,
        reflector: TypeReflector | None = None,
    ) -> None:
        """Initialize the facade and its resolver.

        Args:
            registries: Initial base registries, searched in the given order.
            on_missing_method: Behavior when the requested constructor member
                does not exist. ``TREAT_AS_NO_PARAMETERS`` constructs with no
                arguments instead of failing.
            reflector: Parameter reflector shared with the resolver.

        """
        self.resolver = Resolver(
            registries,
            on_missing_method=on_missing_method,
            reflector=reflector,
        )

    @property
    def registries(self) -> tuple[SupportsRegistry, ...]:
        return self.resolver.registries

    def add_registry(self, registry: SupportsRegistry) -> Self:
        """Append a registry to the base chain.

        Args:
            registry: Any object exposing ``has(key)`` and ``get(key)``.

        """
        self.resolver.add_registry(registry)
        return self

    def list_dependencies(
        self,
        target: Any,
        member_name: str = CONSTRUCTOR_NAME,
    ) -> list[ParameterDescriptor]:
        """Describe the parameters of ``target.member_name`` without resolving them."""
        return self.resolver.list_dependencies(target, member_name)

    def resolve_dependencies(
        self,
        target: Any,
        member_name: str | None = CONSTRUCTOR_NAME,
        extra: Sequence[SupportsRegistry] = (),
    ) -> list[Any]:
        """Return resolved argument values for ``target.member_name``.

        See ``Resolver.resolve_dependencies`` for the per-parameter rules.
        """
        return self.resolver.resolve_dependencies(target, member_name, extra)

    @overload
    def instantiate(
        self,
        target: type[T],
        member_name: str | None = CONSTRUCTOR_NAME,
        extra: Sequence[SupportsRegistry] = (),
    ) -> T: ...

    @overload
    def instantiate(
        self,
        target: str,
        member_name: str | None = CONSTRUCTOR_NAME,
        extra: Sequence[SupportsRegistry] = (),
    ) -> Any: ...

    def instantiate(
        self,
        target: type[Any] | str,
        member_name: str | None = CONSTRUCTOR_NAME,
        extra: Sequence[SupportsRegistry] = (),
    ) -> Any:
        """Create a new instance after resolving all of its dependencies.

        With the default ``member_name`` the class itself is called. Any other
        member is treated as an alternate constructor, such as a classmethod
        factory, and is called with the resolved arguments instead.

        Args:
            target: Class to construct, or its dotted path
                (``"package.module.Class"`` or ``"package.module:Class"``).
            member_name: Constructor-like member to reflect and call. ``None``
                constructs the class with no arguments.
            extra: Call-scoped registries searched before the base chain.

        Raises:
            TargetNotFoundError: If the target does not name a concrete class.
            ReflectionError: If the member cannot be reflected, or is a plain
                instance method rather than a classmethod or staticmethod.
            UnmetDependencyError: If a required parameter has no registry match.
            InvalidRegistryValueError: If a matching registry entry is unusable.

        """
        cls = self._resolve_target(target)
        constructor = self._constructor(cls, member_name)
        resolved = self.resolver.resolve_call(cls, member_name, extra)
        logger.debug(
            "Instantiating %s via %s with %d positional and %d keyword arguments",
            cls.__qualname__,
            getattr(constructor, "__name__", repr(constructor)),
            len(resolved.args),
            len(resolved.kwargs),
        )
        return constructor(*resolved.args, **resolved.kwargs)

    def _constructor(self, cls: type[Any], member_name: str | None) -> Any:
        if member_name is None or member_name == CONSTRUCTOR_NAME:
            return cls
        if not self.resolver.reflector.has_member(cls, member_name):
            return cls
        if not isinstance(
            inspect.getattr_static(cls, member_name),
            (classmethod, staticmethod),
        ):
            msg = (
                f'Member "{member_name}" of {cls.__qualname__} is not a classmethod or '
                "staticmethod and cannot be used as a constructor"
            )
            raise ReflectionError(msg)
        return getattr(cls, member_name)

    def _resolve_target(self, target: type[Any] | str) -> type[Any]:
        if isinstance(target, str):
            target = self._import_target(target)
        if not inspect.isclass(target):
            raise TargetNotFoundError(target, "not a class")
        if inspect.isabstract(target):
            raise TargetNotFoundError(target, "abstract class")
        return target

    def _import_target(self, path: str) -> Any:
        module_name, separator, attribute_path = path.partition(":")
        if not separator:
            module_name, _, attribute_path = path.rpartition(".")
        if not module_name or not attribute_path:
            raise TargetNotFoundError(path, "expected a dotted path")

        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as error:
            raise TargetNotFoundError(path, str(error)) from error

        for attribute in attribute_path.split("."):
            try:
                obj = getattr(obj, attribute)
            except AttributeError as error:
                raise TargetNotFoundError(path, str(error)) from error
        return obj


__all__ = ["Autowire"]
