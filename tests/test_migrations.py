from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from hsportal.models import AchievementRate

repo_root = Path(__file__).resolve().parent.parent


def _alembic_config(url):
    cfg = Config(str(repo_root / "alembic.ini"))
    cfg.set_main_option("script_location", str(repo_root / "alembic"))
    cfg.attributes["database_url"] = url
    return cfg


def test_upgrade_creates_achievement_rates_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    command.upgrade(_alembic_config(url), "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        columns = {col["name"] for col in inspector.get_columns("achievement_rates")}
        assert columns == set(AchievementRate.__table__.columns.keys())

        indexes = {ix["name"]: ix["column_names"] for ix in inspector.get_indexes("achievement_rates")}
        assert indexes["ix_achievement_rates_created_at"] == ["created_at"]
    finally:
        engine.dispose()


def test_downgrade_drops_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = _alembic_config(url)
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(url)
    try:
        assert "achievement_rates" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
