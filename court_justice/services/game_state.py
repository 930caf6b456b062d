from dataclasses import dataclass
from typing import Any, Callable, Dict, get_args

from pydantic import ValidationError

from ..models.case import VERDICTS
from ..models.game import CATEGORY_FIELDS, ProgressRecord, Screen, Settings
from .verdict import evaluate

# ---- tipos de acción ----
NAVIGATE = "navigate"
START_CASE = "start-case"
SUBMIT_VERDICT = "submit-verdict"
ADD_COINS = "add-coins"
SUBTRACT_COINS = "subtract-coins"
PURCHASE_ITEM = "purchase-item"
EQUIP_ITEM = "equip-item"
LOAD_STATE = "load-state"
UPDATE_SETTINGS = "update-settings"
UNLOCK_ACHIEVEMENT = "unlock-achievement"
COMPLETE_TUTORIAL = "complete-tutorial"
DISCOVER_CLUE = "discover-clue"

@dataclass(frozen=True)
class Action:
    kind: str
    payload: Any = None

# firma de handler
Handler = Callable[[ProgressRecord, Any], ProgressRecord]
_REGISTRY: Dict[str, Handler] = {}

def handles(kind: str):
    def deco(fn: Handler):
        _REGISTRY[kind] = fn
        return fn
    return deco

def apply(state: ProgressRecord, action: Action) -> ProgressRecord:
    """
    Función de transición pura. Tipos desconocidos -> estado sin cambios.
    """
    fn = _REGISTRY.get(action.kind)
    if not fn:
        return state
    return fn(state, action.payload)

# -------- handlers --------

@handles(NAVIGATE)
def _navigate(state: ProgressRecord, screen: str):
    if screen not in get_args(Screen):
        return state
    return state.model_copy(update={"screen": screen})

@handles(START_CASE)
def _start_case(state: ProgressRecord, case):
    return state.model_copy(update={
        "current_case": case,
        "screen": "case",
        "discovered_clues": (),
    })

@handles(DISCOVER_CLUE)
def _discover_clue(state: ProgressRecord, clue_id: str):
    case = state.current_case
    if case is None or clue_id not in case.clue_ids() or clue_id in state.discovered_clues:
        return state
    return state.model_copy(update={"discovered_clues": state.discovered_clues + (clue_id,)})

@handles(SUBMIT_VERDICT)
def _submit_verdict(state: ProgressRecord, verdict: str):
    case = state.current_case
    if case is None or verdict not in VERDICTS:
        return state

    ok, delta = evaluate(verdict, case.correct_verdict)
    streak = state.current_streak + 1 if ok else 0
    all_clues = bool(case.visual_clues) and case.clue_ids() <= set(state.discovered_clues)

    return state.model_copy(update={
        "coins": max(0, state.coins + delta),
        "completed_cases": state.completed_cases + 1,
        "correct_verdicts": state.correct_verdicts + (1 if ok else 0),
        "incorrect_verdicts": state.incorrect_verdicts + (0 if ok else 1),
        "current_streak": streak,
        "best_streak": max(state.best_streak, streak),
        "hard_cases_correct": state.hard_cases_correct + (1 if ok and case.difficulty == "hard" else 0),
        "thorough_cases": state.thorough_cases + (1 if all_clues else 0),
        "current_case": None,
        "discovered_clues": (),
    })

@handles(ADD_COINS)
def _add_coins(state: ProgressRecord, amount: int):
    return state.model_copy(update={"coins": max(0, state.coins + int(amount))})

@handles(SUBTRACT_COINS)
def _subtract_coins(state: ProgressRecord, amount: int):
    return state.model_copy(update={"coins": max(0, state.coins - int(amount))})

@handles(PURCHASE_ITEM)
def _purchase_item(state: ProgressRecord, payload):
    # (id, precio): cobro y alta del ítem en una sola transición
    item_id, price = payload
    price = int(price)
    if item_id in state.purchased_items or price <= 0 or state.coins < price:
        return state
    return state.model_copy(update={
        "coins": state.coins - price,
        "purchased_items": state.purchased_items + (item_id,),
    })

@handles(EQUIP_ITEM)
def _equip_item(state: ProgressRecord, payload):
    item_id, category = payload
    field = CATEGORY_FIELDS.get(category, category)
    if field not in type(state.customization).model_fields:
        return state
    custom = state.customization.model_copy(update={field: item_id})
    return state.model_copy(update={"customization": custom})

@handles(LOAD_STATE)
def _load_state(state: ProgressRecord, new_state: ProgressRecord):
    return new_state

@handles(UPDATE_SETTINGS)
def _update_settings(state: ProgressRecord, partial: dict):
    # merge parcial: claves desconocidas o valores inválidos se descartan
    current = state.settings.model_dump()
    merged = dict(current)
    for key, value in dict(partial).items():
        if key not in Settings.model_fields:
            continue
        try:
            candidate = Settings.model_validate({**current, key: value})
        except ValidationError:
            continue
        merged[key] = getattr(candidate, key)
    if merged == current:
        return state
    return state.model_copy(update={"settings": Settings(**merged)})

@handles(UNLOCK_ACHIEVEMENT)
def _unlock_achievement(state: ProgressRecord, achievement_id: str):
    achs = tuple(
        a.model_copy(update={"unlocked": True}) if a.id == achievement_id else a
        for a in state.achievements
    )
    return state.model_copy(update={"achievements": achs})

@handles(COMPLETE_TUTORIAL)
def _complete_tutorial(state: ProgressRecord, _payload):
    return state.model_copy(update={"tutorial_completed": True})
