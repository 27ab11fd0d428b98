import functools
from inspect import Parameter
from typing import Optional

import pytest

from autowire import ParameterDescriptor, ReflectionError, TypeReflector
from tests.classes import (
    Configured,
    DepsA,
    DepsAnnotated,
    DepsAoptsB,
    DepsAoptsCustom,
    DepsFactory,
    DepsForwardRef,
    DepsGeneric,
    DepsKeywordOnly,
    DepsNullableWithDefault,
    DepsUnion,
    DepsUntyped,
    DepsVariadic,
    NoConstructor,
    SimpleA,
    SimpleB,
    SimpleC,
)


@pytest.fixture(scope="module")
def reflector() -> TypeReflector:
    return TypeReflector()


def _summary(descriptors: list[ParameterDescriptor]) -> list[tuple[str, type, bool, bool]]:
    return [
        (descriptor.name, descriptor.dependency_type, descriptor.allows_null, descriptor.is_optional)
        for descriptor in descriptors
    ]


def test_describes_constructor_parameters_in_order(reflector: TypeReflector) -> None:
    descriptors = reflector.describe_parameters(DepsAoptsB)

    assert _summary(descriptors) == [
        ("dep_a", SimpleA, False, False),
        ("dep_b", SimpleB, True, False),
    ]
    assert [descriptor.type_name for descriptor in descriptors] == ["SimpleA", "SimpleB"]


def test_describes_defaulted_parameter_as_optional(reflector: TypeReflector) -> None:
    descriptors = reflector.describe_parameters(DepsAoptsCustom)

    assert _summary(descriptors) == [
        ("dep_a", SimpleA, False, False),
        ("dep_custom", str, False, True),
    ]
    assert descriptors[1].default == "SimpleB"


def test_none_default_makes_parameter_nullable_and_optional(reflector: TypeReflector) -> None:
    descriptors = reflector.describe_parameters(DepsNullableWithDefault)

    assert _summary(descriptors) == [("dep_b", SimpleB, True, True)]


def test_class_without_constructor_has_no_parameters(reflector: TypeReflector) -> None:
    assert reflector.describe_parameters(NoConstructor) == []
    assert reflector.describe_parameters(NoConstructor()) == []


def test_instance_target_reflects_bound_member(reflector: TypeReflector) -> None:
    instance = DepsFactory(SimpleA(), SimpleC(), created_by="test")

    descriptors = reflector.describe_parameters(instance, "configure")

    assert _summary(descriptors) == [("dep_b", SimpleB, False, False)]


def test_classmethod_and_staticmethod_members(reflector: TypeReflector) -> None:
    assert _summary(reflector.describe_parameters(DepsFactory, "create")) == [
        ("dep_a", SimpleA, False, False),
        ("dep_c", SimpleC, False, False),
    ]
    assert _summary(reflector.describe_parameters(DepsFactory, "build")) == [
        ("dep_a", SimpleA, False, False),
    ]


def test_plain_method_on_class_drops_self(reflector: TypeReflector) -> None:
    assert _summary(reflector.describe_parameters(DepsFactory, "configure")) == [
        ("dep_b", SimpleB, False, False),
    ]


def test_function_targets_ignore_member_name(reflector: TypeReflector) -> None:
    def handler(dep_a: SimpleA, dep_b: Optional[SimpleB] = None) -> None:
        pass

    descriptors = reflector.describe_parameters(handler, "ignored")

    assert _summary(descriptors) == [
        ("dep_a", SimpleA, False, False),
        ("dep_b", SimpleB, True, True),
    ]


def test_partial_targets_are_reflected(reflector: TypeReflector) -> None:
    def handler(dep_a: SimpleA, dep_c: SimpleC) -> None:
        pass

    descriptors = reflector.describe_parameters(functools.partial(handler, SimpleA()))

    assert _summary(descriptors) == [("dep_c", SimpleC, False, False)]


def test_keyword_only_kind_is_recorded(reflector: TypeReflector) -> None:
    descriptors = reflector.describe_parameters(DepsKeywordOnly)

    assert [descriptor.kind for descriptor in descriptors] == [
        Parameter.POSITIONAL_OR_KEYWORD,
        Parameter.KEYWORD_ONLY,
        Parameter.KEYWORD_ONLY,
    ]
    assert [descriptor.is_keyword_only for descriptor in descriptors] == [False, True, True]


def test_variadic_parameters_are_skipped(reflector: TypeReflector) -> None:
    assert _summary(reflector.describe_parameters(DepsVariadic)) == [
        ("dep_a", SimpleA, False, False),
    ]


def test_annotated_metadata_is_unwrapped(reflector: TypeReflector) -> None:
    assert _summary(reflector.describe_parameters(DepsAnnotated)) == [
        ("dep_a", SimpleA, False, False),
    ]


def test_describe_is_idempotent(reflector: TypeReflector) -> None:
    assert reflector.describe_parameters(DepsAoptsB) == reflector.describe_parameters(DepsAoptsB)


def test_missing_member_fails(reflector: TypeReflector) -> None:
    with pytest.raises(ReflectionError, match='Method "missing_method" does not exist'):
        reflector.describe_parameters(SimpleA, "missing_method")


def test_non_callable_member_fails(reflector: TypeReflector) -> None:
    with pytest.raises(ReflectionError, match="is not callable"):
        reflector.describe_parameters(Configured, "not_callable")


@pytest.mark.parametrize("target", [DepsUntyped, DepsUnion, DepsGeneric])
def test_parameters_without_single_concrete_class_fail(
    reflector: TypeReflector,
    target: type,
) -> None:
    with pytest.raises(ReflectionError):
        reflector.describe_parameters(target)


def test_unresolvable_forward_reference_fails_with_original_error(
    reflector: TypeReflector,
) -> None:
    with pytest.raises(ReflectionError, match="Original annotation error") as exc_info:
        reflector.describe_parameters(DepsForwardRef)

    assert isinstance(exc_info.value.__cause__, NameError)


def test_has_member(reflector: TypeReflector) -> None:
    assert reflector.has_member(DepsFactory, "create")
    assert reflector.has_member(DepsA, "__init__")
    assert not reflector.has_member(DepsA, "create")
