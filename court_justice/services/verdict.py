from typing import NamedTuple

CORRECT_REWARD = 50
WRONG_PENALTY = -10

class VerdictResult(NamedTuple):
    is_correct: bool
    coins_delta: int

def evaluate(submitted: str, correct: str) -> VerdictResult:
    # Pago plano: la dificultad cambia el contenido del caso, no la recompensa
    ok = submitted == correct
    return VerdictResult(ok, CORRECT_REWARD if ok else WRONG_PENALTY)
