import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture(params=[True, False], ids=["little", "big"])
def little_endian(request):
    """Run a test once per byte order."""
    return request.param


@pytest.fixture()
def buffer():
    """Fresh default-constructed buffer (capacity 4, position 0)."""
    from membuffer import MemoryBuffer

    return MemoryBuffer()


@pytest.fixture()
def writer(buffer, little_endian):
    """Writer over ``buffer`` using the parametrized byte order."""
    from writer import MemoryBufferWriter

    return MemoryBufferWriter(buffer, little_endian)


def read_back(buffer, little_endian):
    """Return an ArrayReader over the written region of ``buffer``."""
    from readers import ArrayReader

    return ArrayReader(buffer.array, buffer.position, little_endian)


@pytest.fixture()
def read_back_fn():
    """
    Fixture that provides the read_back helper without importing conftest.
    """
    return read_back
