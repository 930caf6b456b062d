from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..config import BACKUP_PATH, DATABASE_URL
from ..db.models import CaseHistory, GameStateRow, OwnedItem
from ..db.session import init_db, make_engine, make_sessionmaker
from ..models.game import CompletedCase, Customization, CustomizationItem, ProgressRecord
from ..util.dates import to_utc_aware

logger = logging.getLogger(__name__)

STATE_KEY = "current"

class StorageError(RuntimeError):
    """Fallo del almacenamiento persistente."""

class StorageService:
    """
    Guarda el progreso en la base principal (SQLAlchemy) y un snapshot mínimo
    (monedas, casos completados, customización) en un JSON aparte, para poder
    recuperar algo aunque la base principal no responda.
    """

    def __init__(self, database_url: str = DATABASE_URL, backup_path: Path = BACKUP_PATH):
        self.database_url = database_url
        self.backup_path = Path(backup_path)
        self.engine = None
        self.SessionLocal = None

    # ---- ciclo de vida ----
    def init(self):
        try:
            engine = make_engine(self.database_url)
            init_db(engine)
        except SQLAlchemyError as e:
            raise StorageError(f"No se pudo abrir la base {self.database_url}: {e}") from e
        self.engine = engine
        self.SessionLocal = make_sessionmaker(engine)
        logger.info("Almacenamiento listo (%s)", self.database_url)

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    def __enter__(self) -> "StorageService":
        self.init()
        return self

    def __exit__(self, *exc):
        self.close()

    def _session(self):
        if self.SessionLocal is None:
            raise StorageError("Base de datos no inicializada.")
        return self.SessionLocal()

    # ---- progreso ----
    def save_progress(self, state: ProgressRecord):
        """
        Escribe el registro completo y, de forma independiente, el snapshot de
        respaldo. Si alguna de las dos escrituras falla se lanza StorageError,
        pero recién después de haber intentado ambas.
        """
        failures = []
        try:
            with self._session() as db:
                payload = state.model_dump(mode="json")
                row = db.get(GameStateRow, STATE_KEY)
                if row is None:
                    db.add(GameStateRow(id=STATE_KEY, payload=payload))
                else:
                    row.payload = payload
                db.commit()
        except (SQLAlchemyError, StorageError) as e:
            logger.error("Fallo al guardar el progreso en la base principal: %s", e)
            failures.append(f"principal: {e}")

        try:
            self._write_backup(state)
        except OSError as e:
            logger.error("Fallo al escribir el respaldo %s: %s", self.backup_path, e)
            failures.append(f"respaldo: {e}")

        if failures:
            raise StorageError("; ".join(failures))

    def load_progress(self) -> Optional[ProgressRecord]:
        try:
            with self._session() as db:
                row = db.get(GameStateRow, STATE_KEY)
                payload = dict(row.payload) if row else None
            if payload is not None:
                return ProgressRecord.model_validate(payload)
        except (SQLAlchemyError, StorageError, ValidationError) as e:
            logger.warning("No se pudo leer el progreso principal, uso el respaldo: %s", e)
        return self._load_backup()

    def _write_backup(self, state: ProgressRecord):
        snapshot = {
            "coins": state.coins,
            "completed_cases": state.completed_cases,
            "customization": state.customization.model_dump(),
        }
        self.backup_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.backup_path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(snapshot, f)
        tmp.replace(self.backup_path)

    def _load_backup(self) -> Optional[ProgressRecord]:
        if not self.backup_path.exists():
            return None
        try:
            with self.backup_path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            return ProgressRecord(
                coins=max(0, int(raw.get("coins", 0))),
                completed_cases=int(raw.get("completed_cases", 0)),
                customization=Customization.model_validate(raw.get("customization") or {}),
            )
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error("Respaldo ilegible %s: %s", self.backup_path, e)
            return None

    # ---- historial ----
    def append_case_history(self, record: CompletedCase):
        with self._session() as db:
            db.add(CaseHistory(
                case_id=record.case_id,
                verdict=record.verdict,
                correct_verdict=record.correct_verdict,
                was_correct=record.was_correct,
                coins_earned=record.coins_earned,
                completed_at=record.completed_at,
                time_spent=record.time_spent,
            ))
            db.commit()

    def read_case_history(self) -> List[CompletedCase]:
        with self._session() as db:
            rows = db.execute(
                select(CaseHistory).order_by(CaseHistory.completed_at, CaseHistory.id)
            ).scalars().all()

        return [CompletedCase(
            case_id=r.case_id,
            verdict=r.verdict,
            correct_verdict=r.correct_verdict,
            was_correct=r.was_correct,
            coins_earned=r.coins_earned,
            completed_at=to_utc_aware(r.completed_at),
            time_spent=r.time_spent,
        ) for r in rows]

    # ---- customización ----
    def save_owned_items(self, items: Iterable[CustomizationItem]):
        with self._session() as db:
            for it in items:
                db.merge(OwnedItem(item_id=it.id, category=it.category))
            db.commit()

    def owned_item_ids(self) -> Set[str]:
        with self._session() as db:
            rows = db.execute(select(OwnedItem.item_id)).all()
        return {r[0] for r in rows}

    # ---- admin ----
    def clear_all(self):
        with self._session() as db:
            for model in (GameStateRow, CaseHistory, OwnedItem):
                db.execute(delete(model))
            db.commit()
        self.backup_path.unlink(missing_ok=True)
        logger.warning("Se borraron todos los datos guardados")
