import pytest
from sfc_loader.context import TranspileContext
from sfc_loader.loaders import MemoryContentLoader
from sfc_loader.transpiler import Transpiler


@pytest.fixture
def files() -> MemoryContentLoader:
	return MemoryContentLoader()


@pytest.fixture
def context(files: MemoryContentLoader) -> TranspileContext:
	return TranspileContext(loader=files)


@pytest.fixture
def transpiler(context: TranspileContext) -> Transpiler:
	return Transpiler(context)
