from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Iterator, List

import pytest
from fastapi.testclient import TestClient

# apps/api importable without an editable install
_API_DIR = Path(__file__).resolve().parents[1]
if str(_API_DIR) not in sys.path:
    sys.path.insert(0, str(_API_DIR))

from mygm.core.db import init_db, reset_engine  # noqa: E402
from mygm.modules.roster.service import add_wrestler  # noqa: E402
from mygm.modules.saves.service import create_save  # noqa: E402


@pytest.fixture()
def db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    path = tmp_path / "mygm.db"
    monkeypatch.setenv("DATABASE_URL", "sqlite:///" + path.as_posix())
    monkeypatch.delenv("MYGM_STARTING_CASH", raising=False)
    reset_engine()
    init_db()
    yield path
    reset_engine()


@pytest.fixture()
def save(db: Path) -> Dict:
    return create_save(name="Road to Glory", brand="RAW")


@pytest.fixture()
def roster(save: Dict) -> List[Dict]:
    """Four permanent male wrestlers: no signing fees, never expire."""
    names = ["Ace", "Blaze", "Cobra", "Drake"]
    return [
        add_wrestler(save["id"], name=n, gender="Male", alignment="Face" if i % 2 == 0 else "Heel", is_permanent=True)
        for i, n in enumerate(names)
    ]


@pytest.fixture()
def client(db: Path) -> Iterator[TestClient]:
    from mygm.main import app

    with TestClient(app) as c:
        yield c
