import logging

import pytest

from fakes import FakeClock, FakeVideoAdapter
from veogen.services.file_manager import FileManager

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def file_manager(tmp_path) -> FileManager:
    return FileManager(tmp_path / "generations")


@pytest.fixture
def adapter() -> FakeVideoAdapter:
    return FakeVideoAdapter()
