"""
SSMS MRU Cleaner — Entry Point
Run with: python main.py
"""

import sys
import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

# Resolve root so imports work regardless of CWD
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from PyQt6.QtWidgets import QApplication

from core.locator import SettingsLocator
from core.session import SettingsSession
from core.settings import AppSettings
from gui.app import MainWindow

APP_NAME = "SSMS MRU Cleaner"

# Paths
DATA_DIR = ROOT / "data"
CONFIG_FILE = DATA_DIR / "config.json"


def setup_logging(level_name: str = "INFO"):
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(DATA_DIR / "ssmsmru.log", encoding="utf-8"),
        ],
    )


def app_version() -> str:
    try:
        return version("ssms-mru-cleaner")
    except PackageNotFoundError:
        return "0.0.0"


def main():
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    settings = AppSettings(CONFIG_FILE)
    setup_logging(settings.get("log_level", "INFO"))

    logger = logging.getLogger(__name__)
    logger.info(f"{APP_NAME} starting")

    locator = SettingsLocator(extra_paths=settings.get("paths_to_search", ""))
    session = SettingsSession(locator)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName("SSMSMRU")

    window = MainWindow(session, settings, title=f"{APP_NAME} v{app_version()}")
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
