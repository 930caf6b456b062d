from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.game import AchievementState, ProgressRecord
from .achievements.catalog import Achievement, AchCatalog, load_catalog
from .achievements.evaluators import is_completed
from .achievements.rewards import apply_rewards

logger = logging.getLogger(__name__)

__all__ = [
    "Achievement", "AchCatalog", "load_catalog",
    "check_all", "merge_achievements", "progress_for",
]

def check_all(
    state: ProgressRecord, definitions: Iterable[Achievement]
) -> Tuple[ProgressRecord, List[AchievementState]]:
    """
    Evalúa todos los logros todavía bloqueados contra el estado actual.
    Devuelve (estado nuevo, logros recién desbloqueados).

    Los ya desbloqueados se saltean, así que llamarlo dos veces seguidas
    sin cambios de estado no otorga nada la segunda vez.
    """
    unlocked: List[AchievementState] = []
    for a in definitions:
        entry = state.achievement(a.id)
        # Ya desbloqueado -> skip
        if entry is not None and entry.unlocked:
            continue
        if entry is None:
            # sin fila en el save (no se hizo el merge): agregar la definición fresca
            state = state.model_copy(update={"achievements": state.achievements + (a.fresh_state(),)})

        done, _ = is_completed(state, a)
        if not done:
            continue

        state, summary = apply_rewards(state, a)
        logger.info("Logro desbloqueado: %s (%s)", a.id, summary)
        unlocked.append(state.achievement(a.id))
    return state, unlocked

def merge_achievements(
    persisted: Sequence[AchievementState], definitions: Iterable[Achievement]
) -> Tuple[AchievementState, ...]:
    """
    Por cada definición actual: gana lo persistido si existe ese id, si no
    entra la definición fresca. Ids persistidos que ya no están definidos
    se descartan.
    """
    by_id = {a.id: a for a in persisted}
    merged = []
    known = set()
    for d in definitions:
        known.add(d.id)
        merged.append(by_id.get(d.id) or d.fresh_state())

    stale = [i for i in by_id if i not in known]
    if stale:
        logger.info("Logros persistidos sin definición actual, descartados: %s", stale)
    return tuple(merged)

def progress_for(state: ProgressRecord, a: Achievement) -> Tuple[str, Optional[str]]:
    """
    Para presentar: ("locked" | "unlocked", progreso "x/y" o None).
    """
    entry = state.achievement(a.id)
    if entry is not None and entry.unlocked:
        return ("unlocked", None)
    _, progress = is_completed(state, a)
    return ("locked", progress)
