from datetime import datetime, timezone
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

from .case import Case, Difficulty, Verdict

Screen = Literal["menu", "case", "shop", "statistics", "achievements", "settings"]
ItemCategory = Literal["courtroom", "gavel", "robe", "decoration"]

STARTING_COINS = 100

# categoría del shop -> campo de Customization
CATEGORY_FIELDS: dict[str, str] = {
    "courtroom": "courtroom_theme",
    "gavel": "gavel_design",
    "robe": "judge_robe",
    "decoration": "bench_decoration",
}

class _Frozen(BaseModel):
    # extra="ignore": campos persistidos que ya no existen no rompen la carga
    model_config = ConfigDict(frozen=True, extra="ignore")

class Customization(_Frozen):
    courtroom_theme: str = "classic"
    gavel_design: str = "default"
    judge_robe: str = "default_robe"
    bench_decoration: str = "none"

class Settings(_Frozen):
    sound_enabled: bool = True
    music_enabled: bool = True
    difficulty: Difficulty = "medium"
    hint_highlight_enabled: bool = True

class AchievementState(_Frozen):
    id: str
    name: str
    description: str
    unlocked: bool = False
    reward: int = 0

class ProgressRecord(_Frozen):
    """
    El "save" completo del jugador. Solo se reemplaza a través de
    `services.game_state.apply`; nunca se muta en el lugar.
    """
    screen: Screen = "menu"
    coins: int = Field(default=STARTING_COINS, ge=0)
    current_case: Case | None = None
    completed_cases: int = 0
    correct_verdicts: int = 0
    incorrect_verdicts: int = 0
    current_streak: int = 0
    best_streak: int = 0
    customization: Customization = Customization()
    settings: Settings = Settings()
    achievements: tuple[AchievementState, ...] = ()
    purchased_items: tuple[str, ...] = ()
    tutorial_completed: bool = False

    hard_cases_correct: int = 0
    thorough_cases: int = 0
    discovered_clues: tuple[str, ...] = ()

    def achievement(self, achievement_id: str) -> AchievementState | None:
        for a in self.achievements:
            if a.id == achievement_id:
                return a
        return None

class CompletedCase(_Frozen):
    case_id: str
    verdict: Verdict
    correct_verdict: Verdict
    was_correct: bool
    coins_earned: int
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    time_spent: float = 0.0

class CustomizationItem(_Frozen):
    id: str
    category: ItemCategory
    name: str
    description: str
    price: int = Field(ge=0)
    owned: bool = False
    image_url: str = ""
