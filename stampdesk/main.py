import logging
import sys

from PyQt5.QtWidgets import QApplication

from stampdesk.config import load_settings
from stampdesk.core.stamps import StampCatalog
from stampdesk.errors import CatalogError
from stampdesk.ui import MainWindow
from stampdesk.utils import setup_logging

logger = logging.getLogger(__name__)


def main():
    """
    Main function to run the stamping application.
    It checks for a file path passed as a command-line argument.
    """
    settings = load_settings()
    setup_logging(settings.log_level)

    app = QApplication(sys.argv)

    try:
        catalog = StampCatalog.from_manifest(settings.stamps_dir, settings.default_stamp_size)
    except CatalogError as e:
        logger.error("%s", e)
        catalog = StampCatalog()

    file_path = None
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    window = MainWindow(settings, catalog, file_path)
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
