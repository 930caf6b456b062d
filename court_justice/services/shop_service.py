from pathlib import Path
from typing import AbstractSet, List

from ..config import SHOP_PATH
from ..models.game import CustomizationItem, ProgressRecord
from .data_loader import load_shop_catalog

class ShopService:
    """Reglas de la tienda de customización."""

    @staticmethod
    def merge_owned(items: List[CustomizationItem], owned_ids: AbstractSet[str]) -> List[CustomizationItem]:
        # Los ítems gratis se consideran siempre comprados
        return [
            it.model_copy(update={"owned": it.price == 0 or it.id in owned_ids})
            for it in items
        ]

    @staticmethod
    def load_items(owned_ids: AbstractSet[str], path: Path = SHOP_PATH) -> List[CustomizationItem]:
        return ShopService.merge_owned(load_shop_catalog(path).items, owned_ids)

    @staticmethod
    def can_purchase(state: ProgressRecord, item_id: str, price: int) -> bool:
        # precio 0 = ítem gratis, ya es del jugador
        if price <= 0 or item_id in state.purchased_items:
            return False
        return state.coins >= price
