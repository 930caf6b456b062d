import random
from typing import AbstractSet, Tuple

from ..models.case import (
    Appearance, BodyLanguage, Case, CaseTemplate, Character, Hotspot,
    JuryOpinion, Position, VisualClue, opposite,
)
from .case_catalog import CaseCatalog

JURY_SIZE = 12
JURY_AGREE_THRESHOLD = 0.3   # r > 0.3 -> coincide con el veredicto correcto
JURY_CONFIDENCE = (5, 9)

FIRST_NAMES = ["James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda", "David", "Elizabeth"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez"]

# rol -> (sprite, posición en la sala)
CHARACTER_LAYOUT: dict[str, tuple[str, Position]] = {
    "prosecutor": ("/assets/images/characters/prosecutor.png", Position(x=100, y=200)),
    "defense":    ("/assets/images/characters/defense-lawyer.png", Position(x=400, y=200)),
    "defendant":  ("/assets/images/characters/defendant.png", Position(x=500, y=200)),
}

# tipo de pista -> hotspot. Tipos nuevos: agregar acá y en el catálogo, nada más.
CLUE_HOTSPOTS: dict[str, Hotspot] = {
    "sweating":     Hotspot(x=120, y=180, width=40, height=40),
    "fidgeting":    Hotspot(x=100, y=250, width=60, height=60),
    "nervous-eyes": Hotspot(x=115, y=195, width=30, height=20),
    "confident":    Hotspot(x=110, y=190, width=50, height=50),
}
DEFAULT_HOTSPOT = Hotspot(x=100, y=200, width=50, height=50)

class NoCaseAvailableError(RuntimeError):
    """No hay ninguna plantilla para la dificultad pedida (error de configuración)."""

# ---------- selección ----------

def pick_template(
    catalog: CaseCatalog,
    difficulty: str,
    used_ids: AbstractSet[str],
    rng: random.Random,
    exclude_used: bool = True,
) -> Tuple[CaseTemplate, frozenset[str]]:
    """
    Devuelve (plantilla, nuevo set de usados).
    Sin reposición dentro de un ciclo; al agotarse el pool se reinicia el
    ciclo y se reintenta una sola vez.
    """
    pool = catalog.templates_for(difficulty)
    available = [t for t in pool if not exclude_used or t.id not in used_ids]

    if not available:
        if not pool:
            raise NoCaseAvailableError(f"No hay casos disponibles para la dificultad '{difficulty}'.")
        # ciclo agotado -> empezar de nuevo
        used_ids = frozenset()
        available = list(pool)

    template = rng.choice(available)
    return template, frozenset(used_ids) | {template.id}

# ---------- armado ----------

def body_language(should_be_confident: bool, rng: random.Random) -> BodyLanguage:
    # Sesgo siempre en la dirección del veredicto correcto; el azar solo varía la intensidad
    c = should_be_confident
    return BodyLanguage(
        nervous=not c and rng.random() > 0.3,
        confident=c and rng.random() > 0.3,
        fidgeting=not c and rng.random() > 0.5,
        eye_contact=c or rng.random() > 0.6,
        sweating=not c and rng.random() > 0.4,
    )

def random_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"

def make_character(role: str, confident: bool, rng: random.Random) -> Character:
    sprite, pos = CHARACTER_LAYOUT[role]
    return Character(
        name=random_name(rng),
        role=role,
        appearance=Appearance(sprite=sprite, position=pos),
        body_language=body_language(confident, rng),
    )

def hotspot_for(clue_type: str) -> Hotspot:
    return CLUE_HOTSPOTS.get(clue_type, DEFAULT_HOTSPOT)

def visual_clues(template: CaseTemplate) -> tuple[VisualClue, ...]:
    return tuple(
        VisualClue(
            id=f"clue_{idx}",
            character_role=c.role,
            clue_type=c.category,
            description=c.hint,
            hint=c.hint,
            points_to_guilt=c.points_to_guilt,
            difficulty=template.difficulty,
            position=hotspot_for(c.type),
        )
        for idx, c in enumerate(template.prosecutor_clues)
    )

def jury_opinions(correct_verdict: str, rng: random.Random) -> tuple[JuryOpinion, ...]:
    lo, hi = JURY_CONFIDENCE
    opinions = []
    for juror in range(1, JURY_SIZE + 1):
        agrees = rng.random() > JURY_AGREE_THRESHOLD
        opinions.append(JuryOpinion(
            juror_id=juror,
            opinion=correct_verdict if agrees else opposite(correct_verdict),
            confidence=rng.randint(lo, hi),
        ))
    return tuple(opinions)

def build_case(template: CaseTemplate, rng: random.Random) -> Case:
    guilty = template.correct_verdict == "guilty"
    prosecutor = make_character("prosecutor", guilty, rng)
    defense = make_character("defense", not guilty, rng)
    defendant = make_character("defendant", not guilty, rng)

    return Case(
        id=template.id,
        title=template.title,
        description=template.description,
        difficulty=template.difficulty,
        correct_verdict=template.correct_verdict,
        prosecutor=prosecutor,
        defense_lawyer=defense,
        defendant=defendant,
        # evidencia y testimonios son contenido autorado: se copian tal cual
        evidence=template.evidence,
        testimonies=template.testimonies,
        jury_opinions=jury_opinions(template.correct_verdict, rng),
        visual_clues=visual_clues(template),
    )

def generate_case(
    catalog: CaseCatalog,
    difficulty: str,
    used_ids: AbstractSet[str],
    rng: random.Random,
    exclude_used: bool = True,
) -> Tuple[Case, frozenset[str]]:
    template, used = pick_template(catalog, difficulty, used_ids, rng, exclude_used)
    return build_case(template, rng), used
