import pytest

from tapscore import ScoringEngine, get_scoring_engine
from tapscore.config import get_settings, reset_settings_cache
from tapscore.engine import build_repository
from tapscore.metrics import render_latest
from tapscore.storage import JsonScoringRepository, MemoryScoringRepository


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TAPSCORE_STORE", raising=False)
    monkeypatch.delenv("TAPSCORE_DATA_DIR", raising=False)
    reset_settings_cache()
    get_scoring_engine.cache_clear()
    yield
    reset_settings_cache()
    get_scoring_engine.cache_clear()


def test_defaults_to_memory_store():
    settings = get_settings()

    assert settings.store == "memory"
    assert settings.data_dir == "data/tapscore"
    assert isinstance(build_repository(), MemoryScoringRepository)


def test_json_store_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TAPSCORE_STORE", "json")
    monkeypatch.setenv("TAPSCORE_DATA_DIR", str(tmp_path / "scores"))

    engine = get_scoring_engine()

    assert isinstance(engine.repository, JsonScoringRepository)
    assert get_scoring_engine() is engine


def test_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("TAPSCORE_STORE=json\n")

    assert get_settings().store == "json"


def test_engine_components_share_repository():
    engine = ScoringEngine()

    assert engine.recorder._repo is engine.repository
    assert engine.finalizer._repo is engine.repository
    assert engine.standings._repo is engine.repository


def test_metrics_exposition_lists_engine_series(engine, add_competition, play):
    add_competition("c1")
    play("c1", "A", [4, 3, 5])
    engine.finalizer.finalize("c1")
    engine.standings.compute_standings("tour-1")

    body = render_latest().decode()

    assert "tapscore_score_writes_total" in body
    assert 'tapscore_finalize_total{status="ok"}' in body
    assert "tapscore_finalize_seconds_count" in body
    assert 'tapscore_standings_seconds_count{scope_kind="tour"}' in body
