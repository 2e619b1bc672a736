from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure the src/ directory is on sys.path so `streamlit run main.py` works
# from a plain checkout, without `pip install -e .`
ROOT_DIR = Path(__file__).resolve().parent
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from kpc_ai_dashboard.config import LOG_LEVEL  # type: ignore
from kpc_ai_dashboard.ui.app import run_app  # type: ignore

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


if __name__ == "__main__":
    run_app()
