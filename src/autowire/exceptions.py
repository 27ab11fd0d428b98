from __future__ import annotations

from typing import Any


class AutowireError(Exception):
    """Represent a base class for all autowire-specific failures.

    Catch this type when you want to handle any autowire error path without
    matching each concrete exception class individually.
    """


class ReflectionError(AutowireError):
    """Signal that a target or one of its parameters cannot be introspected.

    Raised by ``TypeReflector.describe_parameters`` and everything built on it
    when the requested member does not exist, is not callable, or when a
    parameter has no annotation, an unresolvable annotation, or an annotation
    that is not a single concrete class.

    Typical fixes include annotating every injectable parameter with one
    concrete class (``Service`` or ``Service | None``) and making sure forward
    references are importable from the target's module.
    """


class UnmetDependencyError(AutowireError):
    """Signal that a required parameter has no matching registry entry.

    Raised by ``resolve_dependencies`` and ``instantiate`` when a parameter is
    neither nullable nor defaulted and no registry reports membership for its
    type.

    Typical fixes include registering an instance for the type, or passing an
    extra registry for the duration of the call.
    """

    def __init__(self, dependency_type: type[Any], parameter_name: str) -> None:
        self.dependency_type = dependency_type
        self.parameter_name = parameter_name
        super().__init__(
            f'Could not meet required dependency "{dependency_type.__qualname__}" '
            f"for parameter '{parameter_name}'.",
        )


class InvalidRegistryValueError(AutowireError):
    """Signal that a registry holds an unusable value for a dependency type.

    Raised when a registry reports membership for a type but the stored value
    is ``None`` for a non-nullable parameter, or is not an instance of the
    requested type. This is a configuration bug and is never skipped in favour
    of later registries.
    """

    def __init__(self, dependency_type: type[Any], value: Any) -> None:
        self.dependency_type = dependency_type
        self.value = value
        super().__init__(
            f'Registry value for "{dependency_type.__qualname__}" is not a usable '
            f"instance: {value!r}.",
        )


class TargetNotFoundError(AutowireError):
    """Signal that an instantiation target does not name a constructible class.

    Raised by ``Autowire.instantiate`` when a dotted path cannot be imported or
    when the resolved object is not a class.
    """

    def __init__(self, target: Any, reason: str | None = None) -> None:
        self.target = target
        message = f"Class does not exist: {target!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class RegistryKeyNotFoundError(AutowireError):
    """Signal a ``Registry.get`` call for a key that was never set.

    Check ``Registry.has`` first when absence is an expected outcome.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        name = getattr(key, "__qualname__", None) or repr(key)
        super().__init__(f"Registry does not contain {name}")
