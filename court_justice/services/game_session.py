from __future__ import annotations
import logging
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..config import SHOP_PATH
from ..models.case import VERDICTS, Case, VisualClue
from ..models.game import AchievementState, CompletedCase, CustomizationItem, ProgressRecord
from ..util.stats import win_rate_pct
from . import game_state as gs
from .achievements_service import Achievement, check_all, load_catalog, merge_achievements
from .case_builder import NoCaseAvailableError, generate_case
from .case_catalog import CaseCatalog
from .shop_service import ShopService
from .storage_service import StorageError, StorageService
from .verdict import evaluate

logger = logging.getLogger(__name__)

OnTransition = Callable[[ProgressRecord], None]

@dataclass(frozen=True)
class VerdictOutcome:
    is_correct: bool
    coins_delta: int
    new_achievements: List[AchievementState] = field(default_factory=list)

class GameSession:
    """
    Dueño del ProgressRecord durante una sesión. Toda mutación pasa por
    `game_state.apply`; después de cada transición corre el hook
    `on_transition` (por defecto, guardar en el storage).
    """

    def __init__(
        self,
        catalog: CaseCatalog,
        storage: StorageService | None = None,
        achievements: List[Achievement] | None = None,
        rng: random.Random | None = None,
        on_transition: OnTransition | None = None,
        shop_path: Path = SHOP_PATH,
    ):
        self.catalog = catalog
        self.storage = storage
        self.achievements = list(achievements) if achievements is not None else load_catalog().achievements
        self.rng = rng or random.Random()
        self.shop_path = shop_path
        if on_transition is None and storage is not None:
            on_transition = self._persist
        self.on_transition = on_transition

        self.used_ids: frozenset[str] = frozenset()
        self._state = ProgressRecord(achievements=merge_achievements((), self.achievements))
        self._case_started: float | None = None
        self._shop: Dict[str, CustomizationItem] | None = None

    # ---- estado ----
    @property
    def snapshot(self) -> ProgressRecord:
        return self._state

    def dispatch(self, action: gs.Action) -> ProgressRecord:
        return self._commit(gs.apply(self._state, action))

    def _commit(self, state: ProgressRecord) -> ProgressRecord:
        self._state = state
        if self.on_transition is not None:
            self.on_transition(state)
        return state

    def _persist(self, state: ProgressRecord):
        try:
            self.storage.save_progress(state)
        except StorageError as e:
            # el estado en memoria sigue siendo la verdad para esta sesión
            logger.warning("No se pudo guardar el progreso: %s", e)

    def start(self) -> ProgressRecord:
        """Carga el save (si hay), lo mezcla con los logros actuales y lo instala."""
        saved = None
        owned: set[str] = set()
        if self.storage is not None:
            saved = self.storage.load_progress()
            try:
                owned = self.storage.owned_item_ids()
            except (SQLAlchemyError, StorageError) as e:
                logger.warning("No se pudo leer el inventario de customización: %s", e)

        base = saved or ProgressRecord()
        purchased = tuple(dict.fromkeys(base.purchased_items + tuple(sorted(owned))))
        seed = base.model_copy(update={
            "achievements": merge_achievements(base.achievements, self.achievements),
            "purchased_items": purchased,
        })
        logger.info("Sesión iniciada (%s): %d monedas, %d casos",
                    "save cargado" if saved else "nuevo jugador", seed.coins, seed.completed_cases)
        return self.dispatch(gs.Action(gs.LOAD_STATE, seed))

    # ---- casos ----
    def generate_case(self, difficulty: str | None = None) -> Optional[Case]:
        diff = difficulty or self._state.settings.difficulty
        try:
            case, self.used_ids = generate_case(self.catalog, diff, self.used_ids, self.rng)
        except NoCaseAvailableError as e:
            logger.warning("%s", e)
            return None
        self._case_started = time.monotonic()
        self.dispatch(gs.Action(gs.START_CASE, case))
        return case

    def discover_clue(self, clue_id: str) -> Optional[VisualClue]:
        case = self._state.current_case
        if case is None or clue_id in self._state.discovered_clues:
            return None
        clue = next((c for c in case.visual_clues if c.id == clue_id), None)
        if clue is None:
            return None
        self.dispatch(gs.Action(gs.DISCOVER_CLUE, clue_id))
        return clue

    def submit_verdict(self, verdict: str) -> Optional[VerdictOutcome]:
        if verdict not in VERDICTS:
            raise ValueError(f"Veredicto inválido: {verdict!r}")
        case = self._state.current_case
        if case is None:
            return None

        is_correct, delta = evaluate(verdict, case.correct_verdict)
        spent = time.monotonic() - self._case_started if self._case_started is not None else 0.0
        self._case_started = None

        if self.storage is not None:
            try:
                self.storage.append_case_history(CompletedCase(
                    case_id=case.id,
                    verdict=verdict,
                    correct_verdict=case.correct_verdict,
                    was_correct=is_correct,
                    coins_earned=delta,
                    time_spent=round(spent, 2),
                ))
            except (SQLAlchemyError, StorageError) as e:
                logger.warning("No se pudo registrar el caso %s en el historial: %s", case.id, e)

        self.dispatch(gs.Action(gs.SUBMIT_VERDICT, verdict))
        return VerdictOutcome(is_correct, delta, self._check_achievements())

    def _check_achievements(self) -> List[AchievementState]:
        state, unlocked = check_all(self._state, self.achievements)
        if unlocked:
            self._commit(state)
        return unlocked

    # ---- tienda ----
    def _shop_index(self) -> Dict[str, CustomizationItem]:
        if self._shop is None:
            try:
                items = ShopService.load_items(set(), self.shop_path)
            except (OSError, ValueError) as e:
                logger.error("No se pudo cargar la tienda %s: %s", self.shop_path, e)
                items = []
            self._shop = {it.id: it for it in items}
        return self._shop

    def shop_items(self) -> List[CustomizationItem]:
        owned = set(self._state.purchased_items)
        return ShopService.merge_owned(list(self._shop_index().values()), owned)

    def purchase_item(self, item_id: str, price: int) -> bool:
        """
        Compra un ítem del catálogo. El precio del catálogo manda sobre el
        recibido; ids desconocidos e ítems ya poseídos (gratis o comprados)
        se rechazan sin tocar el estado.
        """
        item = self._shop_index().get(item_id)
        if item is None:
            logger.warning("Ítem desconocido en la tienda: %s", item_id)
            return False
        if price != item.price:
            logger.warning("Precio %s para %s no coincide con el catálogo (%s)", price, item_id, item.price)
        if not ShopService.can_purchase(self._state, item_id, item.price):
            return False

        self.dispatch(gs.Action(gs.PURCHASE_ITEM, (item_id, item.price)))

        if self.storage is not None:
            try:
                self.storage.save_owned_items([item])
            except (SQLAlchemyError, StorageError) as e:
                logger.warning("No se pudo guardar el ítem comprado %s: %s", item_id, e)

        self._check_achievements()
        return True

    def equip_item(self, item_id: str, category: str):
        self.dispatch(gs.Action(gs.EQUIP_ITEM, (item_id, category)))

    # ---- resto de acciones ----
    def update_settings(self, **partial):
        self.dispatch(gs.Action(gs.UPDATE_SETTINGS, partial))

    def complete_tutorial(self):
        self.dispatch(gs.Action(gs.COMPLETE_TUTORIAL))

    def navigate(self, screen: str):
        self.dispatch(gs.Action(gs.NAVIGATE, screen))

    # ---- lectura ----
    def history(self) -> List[CompletedCase]:
        if self.storage is None:
            return []
        return self.storage.read_case_history()

    def statistics(self) -> dict:
        s = self._state
        unlocked = [a for a in s.achievements if a.unlocked]
        return {
            "completed_cases": s.completed_cases,
            "correct_verdicts": s.correct_verdicts,
            "incorrect_verdicts": s.incorrect_verdicts,
            "win_rate": win_rate_pct(s.correct_verdicts, s.completed_cases),
            "current_streak": s.current_streak,
            "best_streak": s.best_streak,
            "coins": s.coins,
            "achievements_unlocked": len(unlocked),
            "achievements_total": len(s.achievements),
            "achievement_rewards": sum(a.reward for a in unlocked),
        }
