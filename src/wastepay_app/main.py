"""Application entry point."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication, QDialog

from wastepay_app.core.config import load_config
from wastepay_app.core.container import build_container
from wastepay_app.ui.login_dialog import ROLE_ADMIN, ROLE_DRIVER, LoginDialog
from wastepay_app.ui.main_window import MainWindow
from wastepay_app.ui.portal_windows import DriverWindow, HouseholdWindow

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def run() -> None:
    """Launch the GUI application."""
    config = load_config()
    logging.basicConfig(level=config.logging.level, format=LOG_FORMAT)
    container = build_container(config)

    app = QApplication(sys.argv)
    dialog = LoginDialog(container.auth_service, container.household_service)
    if dialog.exec() != QDialog.DialogCode.Accepted:
        sys.exit(0)

    if dialog.role == ROLE_ADMIN:
        window = MainWindow(
            dialog.principal,
            container.household_service,
            container.staff_service,
            container.reminder_service,
            container.audit_repo,
            config.billing,
        )
    elif dialog.role == ROLE_DRIVER:
        window = DriverWindow(dialog.principal, container.household_service)
    else:
        window = HouseholdWindow(dialog.principal, container.household_service, config.billing)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    run()
