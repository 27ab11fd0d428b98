"""Pytest fixtures for tests that construct objects through autowire.

Enable with ``pytest_plugins = ["autowire.integrations.pytest_plugin"]`` in the
root ``conftest.py`` and override ``autowire_registries`` to provide test
doubles.
"""

from __future__ import annotations

import pytest

from autowire.autowire import Autowire
from autowire.registry import Registry, SupportsRegistry


@pytest.fixture()
def autowire_registry() -> Registry:
    """Fresh, empty registry for the current test."""
    return Registry()


@pytest.fixture()
def autowire_registries(autowire_registry: Registry) -> list[SupportsRegistry]:
    """Base registry chain used by the ``autowire`` fixture.

    Override this fixture to supply a different chain. The default chain holds
    only ``autowire_registry``.

    """
    return [autowire_registry]


@pytest.fixture()
def autowire(autowire_registries: list[SupportsRegistry]) -> Autowire:
    """``Autowire`` instance built from ``autowire_registries``."""
    return Autowire(autowire_registries)
