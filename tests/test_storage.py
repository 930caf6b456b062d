"""
Tests del gateway de persistencia (SQLite en tmp_path + respaldo JSON).
"""
import json
import random
from datetime import datetime, timedelta, timezone

import pytest

from court_justice.db.models import GameStateRow
from court_justice.models.game import CompletedCase, CustomizationItem, ProgressRecord
from court_justice.services.achievements_service import merge_achievements
from court_justice.services.achievements.catalog import Achievement
from court_justice.services.case_builder import build_case
from court_justice.services.storage_service import STATE_KEY, StorageError, StorageService
from conftest import make_template


def _record(definitions):
    case = build_case(make_template("saved", "hard", "not-guilty"), random.Random(3))
    achs = tuple(
        a.model_copy(update={"unlocked": a.id == "first_case"})
        for a in merge_achievements((), definitions)
    )
    return ProgressRecord(
        coins=240, completed_cases=4, correct_verdicts=3, incorrect_verdicts=1,
        current_streak=2, best_streak=3, current_case=case, achievements=achs,
        purchased_items=("scales",), discovered_clues=("clue_0",),
    )


def test_load_without_save_returns_none(storage):
    assert storage.load_progress() is None


def test_progress_round_trip(storage, definitions):
    state = _record(definitions)
    storage.save_progress(state)
    assert storage.load_progress() == state


def test_round_trip_then_merge_with_superset(storage, definitions):
    state = _record(definitions)
    storage.save_progress(state)
    newer = definitions + [Achievement(id="night_owl", name="Night Owl", description="new",
                                       type="cases_completed", params={"count": 50}, reward=10)]
    loaded = storage.load_progress()
    merged = merge_achievements(loaded.achievements, newer)
    by_id = {a.id: a for a in merged}
    for a in state.achievements:
        assert by_id[a.id].unlocked == a.unlocked
    assert by_id["night_owl"].unlocked is False


def test_save_overwrites_singleton(storage):
    storage.save_progress(ProgressRecord(coins=1))
    storage.save_progress(ProgressRecord(coins=2))
    with storage.SessionLocal() as db:
        assert db.query(GameStateRow).count() == 1
    assert storage.load_progress().coins == 2


def test_backup_snapshot_is_written(storage, tmp_path):
    storage.save_progress(ProgressRecord(coins=77, completed_cases=3))
    raw = json.loads((tmp_path / "backup.json").read_text(encoding="utf-8"))
    assert raw["coins"] == 77
    assert raw["completed_cases"] == 3
    assert raw["customization"]["courtroom_theme"] == "classic"


def test_corrupt_primary_falls_back_to_snapshot(storage, definitions):
    state = _record(definitions)
    storage.save_progress(state)
    with storage.SessionLocal() as db:
        db.get(GameStateRow, STATE_KEY).payload = {"coins": -5}
        db.commit()

    loaded = storage.load_progress()
    assert loaded.coins == 240
    assert loaded.completed_cases == 4
    assert loaded.customization == state.customization
    # el snapshot es mínimo: lo demás vuelve a defaults
    assert loaded.achievements == ()
    assert loaded.current_case is None


def test_primary_failure_still_writes_backup(storage, tmp_path):
    storage.close()
    with pytest.raises(StorageError):
        storage.save_progress(ProgressRecord(coins=12))
    assert json.loads((tmp_path / "backup.json").read_text(encoding="utf-8"))["coins"] == 12
    assert storage.load_progress().coins == 12


def test_init_failure_is_surfaced(tmp_path):
    bad = StorageService(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}", tmp_path / "b.json")
    with pytest.raises(StorageError):
        bad.init()


def test_operations_before_init_raise(tmp_path):
    s = StorageService(f"sqlite:///{tmp_path / 'x.db'}", tmp_path / "b.json")
    with pytest.raises(StorageError):
        s.read_case_history()


def test_context_manager_opens_and_closes(tmp_path):
    with StorageService(f"sqlite:///{tmp_path / 'cm.db'}", tmp_path / "b.json") as s:
        assert s.engine is not None
    assert s.engine is None


def test_history_is_ordered_by_completion_time(storage):
    t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i, delta in enumerate([5, 1, 3]):
        storage.append_case_history(CompletedCase(
            case_id=f"c{i}", verdict="guilty", correct_verdict="guilty",
            was_correct=True, coins_earned=50, completed_at=t0 + timedelta(minutes=delta),
        ))
    history = storage.read_case_history()
    assert [h.case_id for h in history] == ["c1", "c2", "c0"]
    assert history[0].completed_at == t0 + timedelta(minutes=1)


def test_owned_items(storage):
    item = CustomizationItem(id="scales", category="decoration", name="Scales",
                             description="", price=30)
    storage.save_owned_items([item])
    storage.save_owned_items([item])
    assert storage.owned_item_ids() == {"scales"}


def test_clear_all(storage, tmp_path):
    storage.save_progress(ProgressRecord(coins=50))
    storage.append_case_history(CompletedCase(
        case_id="c", verdict="guilty", correct_verdict="not-guilty", was_correct=False, coins_earned=-10,
    ))
    storage.clear_all()
    assert storage.load_progress() is None
    assert storage.read_case_history() == []
    assert not (tmp_path / "backup.json").exists()
