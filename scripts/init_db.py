from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from luckyscratch.db.engine import make_engine
from luckyscratch.workflows import open_store


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def print_state() -> None:
    """Report the stored win history and last play of the configured database."""
    store = open_store(engine=make_engine(), create_schema=False)
    print(f"Stored wins: {len(store)}")
    last = store.last_played_at
    print("Last played:", last.isoformat() if last is not None else "never")


def main() -> None:
    """Apply migrations (default to head) and report the stored game state."""
    upgrade_db()
    print_state()


if __name__ == "__main__":
    main()
