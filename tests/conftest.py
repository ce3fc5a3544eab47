import numpy as np
import pytest

from native_dispatch.catalog import Catalog, load_builtins


@pytest.fixture(scope="session")
def builtins() -> Catalog:
    """Built-in catalog shared across the test session."""

    return load_builtins()


@pytest.fixture
def x() -> np.ndarray:
    return np.arange(6, dtype=np.float32).reshape(2, 3)


@pytest.fixture
def y() -> np.ndarray:
    return np.ones((2, 3), dtype=np.float32)
