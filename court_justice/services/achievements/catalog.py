from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import json
from typing import Any, Dict, List

from ...config import ACHIEVEMENTS_PATH
from ...models.game import AchievementState

@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    type: str
    reward: int
    params: Dict[str, Any] = field(default_factory=dict)

    def fresh_state(self) -> AchievementState:
        return AchievementState(
            id=self.id, name=self.name, description=self.description,
            unlocked=False, reward=self.reward,
        )

@dataclass(frozen=True)
class AchCatalog:
    version: int
    achievements: List[Achievement]

def load_catalog(path: Path = ACHIEVEMENTS_PATH) -> AchCatalog:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    achs = [Achievement(**a) for a in raw["achievements"]]
    return AchCatalog(version=raw["version"], achievements=achs)
