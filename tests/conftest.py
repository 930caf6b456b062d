import random
import pytest

from court_justice.models.case import CaseTemplate
from court_justice.services.achievements.catalog import Achievement
from court_justice.services.case_catalog import CaseCatalog
from court_justice.services.storage_service import StorageService

def make_template(tid: str, difficulty: str = "easy", verdict: str = "guilty", clues=None) -> CaseTemplate:
    return CaseTemplate.model_validate({
        "id": tid,
        "title": f"Case {tid}",
        "description": "Test case",
        "difficulty": difficulty,
        "correct_verdict": verdict,
        "prosecutor_clues": clues if clues is not None else [
            {"type": "sweating", "hint": "Sweat on the brow", "points_to_guilt": True},
            {"type": "mystery", "hint": "Something odd", "points_to_guilt": False},
        ],
        "evidence": [
            {"id": "e1", "type": "physical", "title": "Knife", "description": "A knife", "points_to_guilt": True, "weight": 7},
        ],
        "testimonies": [
            {"speaker": "Witness", "role": "prosecutor", "statement": "I saw it.", "credibility": 6,
             "contradictions": ["It was dark."]},
        ],
    })

@pytest.fixture
def catalog():
    return CaseCatalog(templates=[
        make_template("easy_1", "easy", "guilty"),
        make_template("easy_2", "easy", "not-guilty"),
        make_template("hard_1", "hard", "guilty"),
        make_template("hard_2", "hard", "not-guilty"),
        make_template("hard_3", "hard", "guilty"),
    ])

@pytest.fixture
def rng():
    return random.Random(1234)

@pytest.fixture
def definitions():
    return [
        Achievement(id="first_case", name="First Judgment", description="Complete your first case",
                    type="cases_completed", params={"count": 1}, reward=25),
        Achievement(id="perfect_five", name="Perfect Streak", description="5 in a row",
                    type="streak_reached", params={"count": 5}, reward=150),
        Achievement(id="wealthy_judge", name="Wealthy Judge", description="500 coins",
                    type="coins_reached", params={"amount": 500}, reward=100),
        Achievement(id="customizer", name="Customization Expert", description="Buy 2 items",
                    type="items_purchased", params={"count": 2}, reward=50),
        Achievement(id="high_accuracy", name="Justice Prevails", description="80% over 10+",
                    type="accuracy_over", params={"ratio": 0.8, "min_cases": 10}, reward=200),
        Achievement(id="hard_case_master", name="Master Judge", description="Hard case correct",
                    type="hard_cases_correct", params={"count": 1}, reward=150),
        Achievement(id="eagle_eye", name="Eagle Eye", description="All clues found",
                    type="clues_all_found", params={"count": 1}, reward=75),
    ]

@pytest.fixture
def storage(tmp_path):
    s = StorageService(f"sqlite:///{tmp_path / 'test.db'}", tmp_path / "backup.json")
    s.init()
    yield s
    s.close()
