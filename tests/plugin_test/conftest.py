import pytest
from pathlib import Path

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def snapshot_path() -> str:
    return str(FIXTURES_DIR / "snapshot_graph1.json")


@pytest.fixture
def matrix_path() -> str:
    return str(FIXTURES_DIR / "matrix_graph1.txt")
