from autowire.autowire import Autowire
from autowire.exceptions import (
    AutowireError,
    InvalidRegistryValueError,
    ReflectionError,
    RegistryKeyNotFoundError,
    TargetNotFoundError,
    UnmetDependencyError,
)
from autowire.policies import LockMode, MissingMethodPolicy
from autowire.reflection import CONSTRUCTOR_NAME, ParameterDescriptor, TypeReflector
from autowire.registry import Registry, SupportsRegistry
from autowire.resolver import ResolvedCall, Resolver

__all__ = [
    "CONSTRUCTOR_NAME",
    "Autowire",
    "AutowireError",
    "InvalidRegistryValueError",
    "LockMode",
    "MissingMethodPolicy",
    "ParameterDescriptor",
    "ReflectionError",
    "Registry",
    "RegistryKeyNotFoundError",
    "ResolvedCall",
    "Resolver",
    "SupportsRegistry",
    "TargetNotFoundError",
    "TypeReflector",
    "UnmetDependencyError",
]
