"""
Shared fixtures: fresh registries over the bundled seed data.
"""
import pytest

from vnadmin.dataset import get_hierarchy
from vnadmin.directory import AdminDirectory
from vnadmin.registry import Registry, reset_registry


@pytest.fixture(autouse=True)
def fresh_default_registry():
    """Every test starts and ends without a process-wide registry."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def directory(registry):
    return AdminDirectory(registry)


@pytest.fixture
def legacy_registry():
    return Registry(hierarchy=get_hierarchy('vietnam_legacy'))


@pytest.fixture
def legacy_directory(legacy_registry):
    return AdminDirectory(legacy_registry)
