import logging
from pathlib import Path

from ..config import CASES_PATH
from ..models.case import CaseTemplate
from .data_loader import load_case_templates

logger = logging.getLogger(__name__)

class CaseCatalog:
    """Plantillas de casos, cargadas una sola vez e inmutables después."""

    def __init__(self, templates: list[CaseTemplate] | None = None, path: Path = CASES_PATH):
        self.path = path
        self._by_difficulty: dict[str, tuple[CaseTemplate, ...]] = {}
        if templates is not None:
            self._index(templates)

    def _index(self, templates: list[CaseTemplate]):
        grouped: dict[str, list[CaseTemplate]] = {}
        for t in templates:
            grouped.setdefault(t.difficulty, []).append(t)
        self._by_difficulty = {d: tuple(ts) for d, ts in grouped.items()}

    def load(self) -> bool:
        """
        Carga el catálogo desde disco. Si falla queda vacío (modo degradado)
        y devuelve False; nunca propaga la excepción.
        """
        try:
            cases = load_case_templates(self.path)
        except (OSError, ValueError) as e:
            logger.error("No se pudo cargar el catálogo de casos %s: %s", self.path, e)
            self._by_difficulty = {}
            return False

        self._index(cases.templates)
        logger.info("Catálogo de casos cargado: %d plantillas", len(self))
        return True

    def templates_for(self, difficulty: str) -> tuple[CaseTemplate, ...]:
        return self._by_difficulty.get(difficulty, ())

    def difficulties(self) -> list[str]:
        return sorted(self._by_difficulty)

    def __len__(self) -> int:
        return sum(len(ts) for ts in self._by_difficulty.values())
