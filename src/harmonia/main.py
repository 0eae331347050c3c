"""
Harmonia - Main Entry Point

This module provides the main entry point for the application.
"""

import logging
import os
import sys


def configure_logging() -> None:
    """Configure the root logger from HARMONIA_LOG_LEVEL (default WARNING)."""
    level_name = os.environ.get("HARMONIA_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """
    Main entry point for Harmonia.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    # Ensure we're running Python 3.10+
    if sys.version_info < (3, 10):
        print("Error: Harmonia requires Python 3.10 or later")
        return 1

    configure_logging()

    # Import Qt here to avoid import overhead if just checking version
    from PySide6.QtWidgets import QApplication
    from PySide6.QtCore import Qt

    from harmonia import __version__
    from harmonia.ui.main_window import MainWindow

    # Create application instance
    app = QApplication(sys.argv)
    app.setApplicationName("Harmonia DAW")
    app.setApplicationVersion(__version__)
    app.setOrganizationName("Harmonia")

    # Enable high DPI scaling
    app.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    window = MainWindow()
    window.show()

    # Run event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
