from typing import Callable, Optional, Tuple, Dict
from ...models.game import ProgressRecord
from ...util.stats import accuracy
from .catalog import Achievement

# firma de evaluador: (hecho?, progreso "x/y")
Evaluator = Callable[[ProgressRecord, Achievement], Tuple[bool, Optional[str]]]
_REGISTRY: Dict[str, Evaluator] = {}

def evaluator(kind: str):
    def deco(fn: Evaluator):
        _REGISTRY[kind] = fn
        return fn
    return deco

def _count(have: int, need: int):
    return (have >= need, f"{min(have, need)}/{need}")

@evaluator("cases_completed")
def _cases_completed(state: ProgressRecord, a: Achievement):
    return _count(state.completed_cases, int(a.params.get("count", 1)))

@evaluator("streak_reached")
def _streak_reached(state: ProgressRecord, a: Achievement):
    # best_streak: una racha ya lograda cuenta aunque después se haya cortado
    return _count(state.best_streak, int(a.params.get("count", 1)))

@evaluator("coins_reached")
def _coins_reached(state: ProgressRecord, a: Achievement):
    return _count(state.coins, int(a.params.get("amount", 0)))

@evaluator("items_purchased")
def _items_purchased(state: ProgressRecord, a: Achievement):
    return _count(len(state.purchased_items), int(a.params.get("count", 1)))

@evaluator("accuracy_over")
def _accuracy_over(state: ProgressRecord, a: Achievement):
    min_cases = int(a.params.get("min_cases", 10))
    ratio = float(a.params.get("ratio", 0.8))
    if state.completed_cases < min_cases:
        return (False, f"{state.completed_cases}/{min_cases} casos")
    acc = accuracy(state.correct_verdicts, state.completed_cases)
    return (acc >= ratio, f"{acc:.0%}/{ratio:.0%}")

@evaluator("hard_cases_correct")
def _hard_cases_correct(state: ProgressRecord, a: Achievement):
    return _count(state.hard_cases_correct, int(a.params.get("count", 1)))

@evaluator("clues_all_found")
def _clues_all_found(state: ProgressRecord, a: Achievement):
    return _count(state.thorough_cases, int(a.params.get("count", 1)))

def is_completed(state: ProgressRecord, a: Achievement):
    fn = _REGISTRY.get(a.type)
    if not fn:
        return (False, None)
    return fn(state, a)
