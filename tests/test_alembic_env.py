import subprocess
import sys
from pathlib import Path

from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[1]


def _upgrade(url: str) -> None:
    subprocess.run(
        [
            sys.executable,
            "-m",
            "alembic",
            "-c",
            str(ROOT / "alembic.ini"),
            "-x",
            f"db_url={url}",
            "upgrade",
            "head",
        ],
        check=True,
        cwd=ROOT,
    )


def test_migrations_support_async_and_sync(tmp_path):
    async_db = tmp_path / "async.db"
    sync_db = tmp_path / "sync.db"
    _upgrade(f"sqlite+aiosqlite:///{async_db}")
    _upgrade(f"sqlite:///{sync_db}")

    engine = create_engine(f"sqlite:///{sync_db}")
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        indexes = {ix["name"] for ix in inspector.get_indexes("responses")}
    finally:
        engine.dispose()
    assert {
        "organizations",
        "surveys",
        "questions",
        "responses",
        "response_items",
        "qr_tokens",
    } <= tables
    assert "ix_responses_org_submitted" in indexes
