import json
import threading

import pytest

from tapscore.errors import NotFoundError, ValidationError
from tapscore.results.models import Competition
from tapscore.scorecard.holes import GAVE_UP, Strokes
from tapscore.storage import JsonScoringRepository, MemoryScoringRepository
from tapscore.storage.json_store import _sanitize_id

from .conftest import NOW, PARS_3


@pytest.fixture
def json_tour(json_engine):
    json_engine.recorder.add_competition(
        Competition(id="c1", name="Links", date=NOW.date(), scope_id="tour-1", pars=PARS_3)
    )
    return json_engine


def test_participant_survives_reload(json_tour, tmp_path):
    recorder = json_tour.recorder
    participant = recorder.register(
        competition_id="c1", entity_id="A", entity_name="Anna", participant_id="c1-A"
    )
    recorder.record_hole_score(participant.id, 1, 5)
    recorder.record_hole_score(participant.id, 2, -1)
    recorder.record_manual_score(participant.id, {"out": 36, "total": 70})
    recorder.lock(participant.id)

    reopened = JsonScoringRepository(tmp_path / "store")
    loaded = reopened.get_participant("c1-A")

    assert loaded.scorecard.holes[:2] == (Strokes(5), GAVE_UP)
    assert loaded.scorecard.locked is True
    assert loaded.scorecard.locked_at == NOW
    assert loaded.scorecard.manual_score.out == 36
    assert loaded.scorecard.manual_total == 70
    assert [p.id for p in reopened.list_participants("c1")] == ["c1-A"]


def test_hole_values_stored_as_raw_integers(json_tour, tmp_path):
    participant = json_tour.recorder.register(
        competition_id="c1", entity_id="A", entity_name="Anna", participant_id="c1-A"
    )
    json_tour.recorder.record_hole_score(participant.id, 3, -1)

    raw = json.loads((tmp_path / "store" / "participants" / "c1-A.json").read_text())
    assert raw["scorecard"]["holes"] == [0, 0, -1]


def test_results_replaced_as_a_whole(json_tour, tmp_path):
    recorder = json_tour.recorder
    for entity in ("A", "B"):
        pid = recorder.register(
            competition_id="c1", entity_id=entity, entity_name=entity,
            participant_id=f"c1-{entity}",
        ).id
        for hole, shots in enumerate([4, 3, 5], start=1):
            recorder.record_hole_score(pid, hole, shots)
        recorder.lock(pid)

    first = json_tour.finalizer.finalize("c1")
    second = json_tour.finalizer.finalize("c1")

    reopened = JsonScoringRepository(tmp_path / "store")
    assert list(reopened.get_results("c1")) == second == first
    assert reopened.get_competition("c1").results_finalized is True
    leftovers = [p.name for p in (tmp_path / "store" / "results").iterdir()]
    assert leftovers == ["c1.json"]


def test_missing_records(tmp_path):
    repo = JsonScoringRepository(tmp_path)

    assert repo.get_competition("nope") is None
    assert repo.get_participant("nope") is None
    assert repo.get_results("nope") == ()
    assert repo.list_competitions() == []
    assert repo.list_participants("nope") == []


@pytest.mark.parametrize("value", ["../escape", "a/b", "space id", ""])
def test_unsafe_ids_rejected(value):
    with pytest.raises(ValidationError):
        _sanitize_id(value)


def test_unsafe_ids_read_as_missing(json_tour):
    repo = json_tour.repository

    assert repo.get_participant("no such id") is None
    assert repo.get_competition("../c1") is None
    assert repo.get_results("a/b") == ()
    with pytest.raises(NotFoundError):
        json_tour.recorder.get("no such id")
    with pytest.raises(NotFoundError):
        json_tour.finalizer.finalize("no such id")


def test_unsafe_participant_id_rejected_on_register(json_tour):
    with pytest.raises(ValidationError):
        json_tour.recorder.register(
            competition_id="c1",
            entity_id="A",
            entity_name="Anna",
            participant_id="../escape",
        )


def test_memory_repository_returns_copies(engine, add_competition):
    add_competition("c1")
    participant = engine.recorder.register(
        competition_id="c1", entity_id="A", entity_name="A", participant_id="c1-A"
    )

    fetched = engine.repository.get_participant(participant.id)
    fetched.entity_name = "changed"

    assert engine.repository.get_participant(participant.id).entity_name == "A"


def test_competition_lock_is_shared_and_reentrant():
    repo = MemoryScoringRepository()
    lock = repo.competition_lock("c1")

    assert repo.competition_lock("c1") is lock
    assert repo.competition_lock("c2") is not lock
    with lock:
        with repo.competition_lock("c1"):
            pass


def test_concurrent_scoring_and_finalize_never_duplicate(engine, add_competition, play):
    add_competition("c1")
    for entity in ("A", "B", "C", "D"):
        play("c1", entity, [4, 3, 5], lock=False)

    errors = []

    def score(pid):
        try:
            for shots in range(1, 20):
                engine.recorder.record_hole_score(pid, 1, shots)
        except Exception as exc:
            errors.append(exc)

    def finalize():
        try:
            for _ in range(10):
                engine.finalizer.finalize("c1")
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=score, args=(f"c1-{e}",)) for e in "ABCD"]
    threads.append(threading.Thread(target=finalize))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    rows = engine.repository.get_results("c1")
    assert sorted(r.participant_id for r in rows) == ["c1-A", "c1-B", "c1-C", "c1-D"]
