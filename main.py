import logging, random, sys
from court_justice import config
from court_justice.services.case_catalog import CaseCatalog
from court_justice.services.achievements_service import load_catalog
from court_justice.services.game_session import GameSession
from court_justice.services.storage_service import StorageService, StorageError

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("court_justice")

def build_session(storage: StorageService | None) -> GameSession:
    catalog = CaseCatalog(path=config.CASES_PATH)
    catalog.load()
    rng = random.Random(int(config.RNG_SEED)) if config.RNG_SEED else random.Random()
    return GameSession(
        catalog=catalog,
        storage=storage,
        achievements=load_catalog(config.ACHIEVEMENTS_PATH).achievements,
        rng=rng,
    )

def main() -> int:
    storage = StorageService(config.DATABASE_URL, config.BACKUP_PATH)
    try:
        storage.init()
    except StorageError as e:
        # Sin storage se puede jugar igual, pero no se guarda nada
        logger.error("Error al iniciar el almacenamiento: %s", e)
        storage = None

    session = build_session(storage)
    try:
        state = session.start()
        stats = session.statistics()
        logger.info(
            "Listo: %d monedas, %d/%d logros, racha %d (mejor %d)",
            state.coins, stats["achievements_unlocked"], stats["achievements_total"],
            state.current_streak, state.best_streak,
        )
    finally:
        if storage is not None:
            storage.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())
