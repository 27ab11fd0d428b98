"""Shared pytest fixtures for autowire tests."""

import pytest

from autowire import Autowire, Registry
from tests.classes import SimpleA, SimpleB, SimpleC


@pytest.fixture()
def instance_a() -> SimpleA:
    return SimpleA()


@pytest.fixture()
def full_registry(instance_a: SimpleA) -> Registry:
    """Registry holding instances of SimpleA, SimpleB and SimpleC."""
    return Registry({SimpleA: instance_a, SimpleB: SimpleB(), SimpleC: SimpleC()})


@pytest.fixture()
def only_a_registry(instance_a: SimpleA) -> Registry:
    """Registry holding only an instance of SimpleA."""
    registry = Registry()
    registry.set(SimpleA, instance_a)
    return registry


@pytest.fixture()
def empty_autowire() -> Autowire:
    """Autowire without any registries."""
    return Autowire()
