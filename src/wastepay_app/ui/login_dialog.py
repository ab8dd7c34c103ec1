"""Sign-in and household self-registration dialog."""

from __future__ import annotations

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from wastepay_app.services.auth_service import AuthService
from wastepay_app.services.household_service import HouseholdService
from wastepay_app.ui.tasks import (
    AdminSignInTask,
    DriverSignInTask,
    RegisterHouseholdTask,
    RequestCodeTask,
    VerifyCodeTask,
)

ROLE_ADMIN = "ADMIN"
ROLE_HOUSEHOLD = "HOUSEHOLD"
ROLE_DRIVER = "DRIVER"


class LoginDialog(QDialog):
    """Collects credentials for one of the three roles.

    On acceptance ``role`` holds the chosen role and ``principal`` the
    Admin, Driver or Household record that signed in.
    """

    def __init__(self, auth_service: AuthService, household_service: HouseholdService):
        super().__init__()
        self.auth_service = auth_service
        self.household_service = household_service
        self.thread_pool = QThreadPool.globalInstance()
        self.role: str | None = None
        self.principal = None
        self._code_requested_for: str | None = None

        self.setWindowTitle("WastePay - Sign In")
        self.resize(420, 320)

        tabs = QTabWidget()
        tabs.addTab(self._build_sign_in_tab(), "Sign In")
        tabs.addTab(self._build_register_tab(), "Register Household")

        layout = QVBoxLayout(self)
        layout.addWidget(tabs)

    def _build_sign_in_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        form = QFormLayout()

        self.role_selector = QComboBox()
        self.role_selector.addItem("Administrator", ROLE_ADMIN)
        self.role_selector.addItem("Household", ROLE_HOUSEHOLD)
        self.role_selector.addItem("Driver", ROLE_DRIVER)
        self.role_selector.currentIndexChanged.connect(self._on_role_changed)

        self.identifier_input = QLineEdit()
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.code_input = QLineEdit()
        self.code_input.setPlaceholderText("Enter 6-digit OTP")
        self.code_input.setEnabled(False)
        self.status_label = QLabel("")

        form.addRow("Role", self.role_selector)
        form.addRow("Username / Phone", self.identifier_input)
        form.addRow("Password", self.password_input)
        form.addRow("OTP", self.code_input)

        buttons = QHBoxLayout()
        self.request_code_button = QPushButton("Get OTP")
        self.request_code_button.clicked.connect(self.request_code)
        self.request_code_button.setVisible(False)
        sign_in_button = QPushButton("Sign In")
        sign_in_button.clicked.connect(self.sign_in)
        buttons.addWidget(self.request_code_button)
        buttons.addWidget(sign_in_button)

        layout.addLayout(form)
        layout.addLayout(buttons)
        layout.addWidget(self.status_label)
        layout.addStretch(1)
        return tab

    def _build_register_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        form = QFormLayout()
        self.register_name_input = QLineEdit()
        self.register_address_input = QLineEdit()
        self.register_phone_input = QLineEdit()
        form.addRow("Full name", self.register_name_input)
        form.addRow("Address", self.register_address_input)
        form.addRow("Phone", self.register_phone_input)

        register_button = QPushButton("Create Account")
        register_button.clicked.connect(self.register)

        layout.addLayout(form)
        layout.addWidget(register_button)
        layout.addStretch(1)
        return tab

    def _on_role_changed(self, _index: int) -> None:
        role = self.role_selector.currentData()
        is_household = role == ROLE_HOUSEHOLD
        self.password_input.setEnabled(role == ROLE_ADMIN)
        self.request_code_button.setVisible(is_household)
        self.code_input.setEnabled(False)
        self.code_input.clear()
        self._code_requested_for = None
        self.status_label.setText("")

    def request_code(self) -> None:
        task = RequestCodeTask(self.auth_service, self.identifier_input.text())
        task.signals.done.connect(self._on_code_sent)
        task.signals.error.connect(self._show_error)
        self.thread_pool.start(task)

    def _on_code_sent(self, phone: str) -> None:
        self._code_requested_for = phone
        self.code_input.setEnabled(True)
        self.status_label.setText(f"An OTP was sent to {phone}.")

    def sign_in(self) -> None:
        role = self.role_selector.currentData()
        identifier = self.identifier_input.text()
        if role == ROLE_ADMIN:
            task = AdminSignInTask(self.auth_service, identifier, self.password_input.text())
        elif role == ROLE_DRIVER:
            task = DriverSignInTask(self.auth_service, identifier)
        else:
            if not self._code_requested_for:
                self._show_error("Request an OTP first.")
                return
            task = VerifyCodeTask(self.auth_service, self._code_requested_for, self.code_input.text())

        task.signals.done.connect(lambda principal: self._accept_as(role, principal))
        task.signals.error.connect(self._show_error)
        self.thread_pool.start(task)

    def register(self) -> None:
        task = RegisterHouseholdTask(
            self.household_service,
            self.register_name_input.text(),
            self.register_address_input.text(),
            self.register_phone_input.text(),
        )
        task.signals.done.connect(lambda household: self._accept_as(ROLE_HOUSEHOLD, household))
        task.signals.error.connect(self._show_error)
        self.thread_pool.start(task)

    def _accept_as(self, role: str, principal) -> None:
        self.role = role
        self.principal = principal
        self.accept()

    def _show_error(self, message: str) -> None:
        QMessageBox.critical(self, "Sign-in error", message)
