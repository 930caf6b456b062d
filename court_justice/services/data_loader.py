from pathlib import Path
import json
from pydantic import BaseModel, TypeAdapter

from ..config import CASES_PATH, SHOP_PATH
from ..models.case import CaseTemplate
from ..models.game import CustomizationItem

class CasesFile(BaseModel):
    templates: list[CaseTemplate]

class ShopFile(BaseModel):
    items: list[CustomizationItem]

_templates_adapter = TypeAdapter(list[CaseTemplate])
_items_adapter = TypeAdapter(list[CustomizationItem])

def _load_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)

def _check_unique(ids: list[str], what: str):
    seen, dupes = set(), []
    for i in ids:
        if i in seen:
            dupes.append(i)
        seen.add(i)
    if dupes:
        raise ValueError(f"IDs duplicados en {what}: {dupes}")

def load_case_templates(path: Path = CASES_PATH) -> CasesFile:
    """
    Lee el catálogo de casos (array JSON de plantillas).
    Lanza OSError / ValueError / ValidationError si el archivo no sirve;
    decidir qué hacer con eso es cosa del caller.
    """
    templates = _templates_adapter.validate_python(_load_json(path))
    _check_unique([t.id for t in templates], path.name)

    for t in templates:
        ev_ids = [e.id for e in t.evidence]
        _check_unique(ev_ids, f"{t.id}/evidence")

    return CasesFile(templates=templates)

def load_shop_catalog(path: Path = SHOP_PATH) -> ShopFile:
    items = _items_adapter.validate_python(_load_json(path))
    _check_unique([i.id for i in items], path.name)
    return ShopFile(items=items)
