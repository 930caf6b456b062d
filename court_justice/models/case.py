from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

Verdict = Literal["guilty", "not-guilty"]
Difficulty = Literal["easy", "medium", "hard"]
Role = Literal["prosecutor", "defense", "defendant"]

VERDICTS: tuple[str, ...] = ("guilty", "not-guilty")

def opposite(verdict: str) -> str:
    return "not-guilty" if verdict == "guilty" else "guilty"

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

# ---------- Datos de catálogo (autorados) ----------

class Evidence(_Frozen):
    id: str
    type: Literal["physical", "documentary", "testimony"]
    title: str
    description: str
    points_to_guilt: bool
    weight: int = Field(ge=1, le=10)
    image_url: str | None = None

class Testimony(_Frozen):
    speaker: str
    role: Literal["prosecutor", "defense"]
    statement: str
    credibility: int = Field(ge=1, le=10)
    contradictions: tuple[str, ...] = ()

class ClueDescriptor(_Frozen):
    type: str
    hint: str
    points_to_guilt: bool
    role: Role = "prosecutor"
    category: Literal["body-language", "appearance", "behavior"] = "body-language"

class CaseTemplate(_Frozen):
    id: str
    title: str
    description: str
    difficulty: Difficulty
    correct_verdict: Verdict
    prosecutor_clues: tuple[ClueDescriptor, ...] = ()
    evidence: tuple[Evidence, ...] = ()
    testimonies: tuple[Testimony, ...] = ()

# ---------- Caso jugable (generado) ----------

class Position(_Frozen):
    x: int; y: int

class Hotspot(_Frozen):
    x: int; y: int; width: int; height: int

class Appearance(_Frozen):
    sprite: str
    position: Position

class BodyLanguage(_Frozen):
    nervous: bool
    confident: bool
    fidgeting: bool
    eye_contact: bool
    sweating: bool

class Character(_Frozen):
    name: str
    role: Role
    appearance: Appearance
    body_language: BodyLanguage

class JuryOpinion(_Frozen):
    juror_id: int = Field(ge=1, le=12)
    opinion: Verdict
    confidence: int = Field(ge=5, le=9)

class VisualClue(_Frozen):
    id: str
    character_role: Role
    clue_type: Literal["body-language", "appearance", "behavior"]
    description: str
    hint: str
    points_to_guilt: bool
    difficulty: Difficulty
    position: Hotspot

class Case(_Frozen):
    id: str
    title: str
    description: str
    difficulty: Difficulty
    correct_verdict: Verdict
    prosecutor: Character
    defense_lawyer: Character
    defendant: Character
    evidence: tuple[Evidence, ...]
    testimonies: tuple[Testimony, ...]
    jury_opinions: tuple[JuryOpinion, ...] = Field(min_length=12, max_length=12)
    visual_clues: tuple[VisualClue, ...]

    def clue_ids(self) -> set[str]:
        return {c.id for c in self.visual_clues}
