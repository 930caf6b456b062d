from typing import Tuple
from ...models.game import ProgressRecord
from ..game_state import Action, ADD_COINS, UNLOCK_ACHIEVEMENT, apply
from .catalog import Achievement

def apply_rewards(state: ProgressRecord, a: Achievement) -> Tuple[ProgressRecord, str]:
    """
    Marca el logro como desbloqueado y acredita la recompensa, siempre
    pasando por la máquina de estados. Devuelve (estado, resumen).
    """
    state = apply(state, Action(UNLOCK_ACHIEVEMENT, a.id))
    if a.reward:
        state = apply(state, Action(ADD_COINS, a.reward))
        return state, f"+{a.reward} monedas"
    return state, "Sin recompensa definida"
