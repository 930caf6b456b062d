import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE = Path(__file__).resolve().parents[1]

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'court_justice.db'}")
# Snapshot mínimo, independiente de la base principal
BACKUP_PATH = Path(os.getenv("BACKUP_PATH", str(BASE / "data" / "save" / "gameState_backup.json")))

CASES_PATH = Path(os.getenv("CASES_PATH", str(BASE / "data" / "cases" / "cases.json")))
SHOP_PATH = Path(os.getenv("SHOP_PATH", str(BASE / "data" / "customization" / "customization_items.json")))
ACHIEVEMENTS_PATH = Path(os.getenv("ACHIEVEMENTS_PATH", str(BASE / "data" / "achievements" / "achievements.json")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
RNG_SEED = os.getenv("RNG_SEED")  # None -> semilla aleatoria
