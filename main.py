#!/usr/bin/env python3
"""
Item Catalog Browser - headless entry point

Loads the configured item registry, warms the craftability index and prints
the first page of the filtered catalog.

Usage: main.py [REGISTRY_JSON] [SEARCH_TEXT]
"""

import logging
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from logging_config import get_logger

log = logging.getLogger(__name__)

from PySide6.QtCore import QCoreApplication

from engine.catalog import SourceUnavailable
from engine.config import ConfigError, ConfigManager
from services.session_factory import build_session
from utils.paths import init_app_paths


def main(argv=None) -> int:
    """Main application entry point."""
    argv = list(sys.argv if argv is None else argv)
    app = QCoreApplication.instance() or QCoreApplication(argv)
    app.setApplicationName("Item Catalog Browser")
    app.setApplicationVersion("1.0.0")

    try:
        init_app_paths()
        config_manager = ConfigManager()
        config_manager.load_config()
        get_logger(__name__, config_manager.get_log_level())
        if len(argv) > 1:
            config_manager.set('catalog.registry_path', argv[1])

        session = build_session(config_manager)
        session.load()
        if len(argv) > 2:
            session.set_search_text(argv[2])
            session.flush()

        # deliver the queued warm-up notice so craftable-only views refresh
        session.index.wait()
        app.processEvents()

        for entry in session.get_visible_page():
            print(f"{entry.id}\t{entry.display_name}")
        print(session.page_label())
        session.close()
        return 0
    except (ConfigError, SourceUnavailable, ValueError) as e:
        log.error("Failed to start catalog browser: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
