"""Entry point for the Medical Store Manager desktop app."""

import logging
import sys

from PyQt5.QtWidgets import QApplication

from medstore import config
from medstore.seed import ensure_seed
from medstore.storage import KeyValueStore
from medstore.ui.main_window import MainWindow


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = KeyValueStore()
    ensure_seed(store)

    app = QApplication(sys.argv)
    window = MainWindow(store)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
