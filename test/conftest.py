import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def store():
    from tbo.repositories.memory_store import MemoryStore

    return MemoryStore()


@pytest.fixture
def seeded_store():
    from tbo.repositories.memory_store import MemoryStore, seed_demo_data

    s = MemoryStore()
    seed_demo_data(s)
    return s


@pytest.fixture
def container(seeded_store):
    from tbo.application.container import build_container
    from tbo.config import Settings

    return build_container(Settings(), store=seeded_store)
