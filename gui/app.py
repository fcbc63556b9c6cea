"""
SSMS MRU Cleaner — Main Window
PyQt6 GUI over a SettingsSession.
Layout: left (server list) + right (logins for the selected server + actions).
"""

from __future__ import annotations
import logging

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QListWidget, QLabel, QPushButton, QSplitter, QTextEdit,
    QGroupBox, QMessageBox, QStatusBar,
)
from PyQt6.QtCore import Qt, QObject, QEvent
from PyQt6.QtGui import QFont

from core.errors import PathNotFound, SettingsError
from core.locator import SETTINGS_FILE_NAME
from core.session import SettingsSession
from core.settings import AppSettings
from core.studio_status import get_studio_status
from gui.studio_running_dialog import StudioRunningDialog

logger = logging.getLogger(__name__)

DARK_STYLESHEET = """
QMainWindow, QWidget {
    background-color: #0f0f14;
    color: #d4d4e8;
    font-family: 'Segoe UI', sans-serif;
    font-size: 13px;
}
QListWidget {
    background-color: #13131c;
    border: 1px solid #1e1e2e;
    outline: none;
}
QListWidget::item {
    padding: 6px 10px;
    border-bottom: 1px solid #1a1a28;
}
QListWidget::item:selected {
    background-color: #1e1e3a;
    color: #a0a8ff;
    border-left: 3px solid #6060ff;
}
QPushButton {
    background-color: #1e1e3a;
    color: #a0a8ff;
    border: 1px solid #3030a0;
    border-radius: 6px;
    padding: 7px 16px;
}
QPushButton:hover {
    background-color: #28285a;
}
QPushButton:disabled {
    color: #404060;
    border-color: #202040;
}
QPushButton#primary {
    background-color: #3030a0;
    color: #e8e8ff;
    font-weight: 600;
}
QPushButton#danger {
    background-color: #501818;
    color: #ffa0a0;
    border-color: #803030;
}
QGroupBox {
    border: 1px solid #1e1e3a;
    border-radius: 8px;
    margin-top: 10px;
    padding-top: 8px;
    font-weight: 600;
    color: #8080c0;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 12px;
    padding: 0 6px;
}
QTextEdit {
    background-color: #13131c;
    border: 1px solid #1e1e3a;
    color: #a0a0c0;
    font-family: 'Consolas', monospace;
    font-size: 11px;
}
QStatusBar {
    background-color: #0a0a12;
    color: #505080;
}
"""

FILE_NOT_FOUND_MESSAGE = (
    f"Unable to find {SETTINGS_FILE_NAME} file. Manually find file and put path in config file."
)


class _RefreshKeyFilter(QObject):
    """F5 on the server list reloads from disk."""

    def __init__(self, on_refresh, parent=None):
        super().__init__(parent)
        self._on_refresh = on_refresh

    def eventFilter(self, obj, event):
        if event.type() == QEvent.Type.KeyPress and event.key() == Qt.Key.Key_F5:
            self._on_refresh()
            return True
        return False


class MainWindow(QMainWindow):
    def __init__(self, session: SettingsSession, settings: AppSettings, title: str = "SSMS MRU Cleaner"):
        super().__init__()
        self.session = session
        self.settings = settings

        self.setWindowTitle(title)
        self.setMinimumSize(640, 420)
        self.setStyleSheet(DARK_STYLESHEET)

        self._build_ui()
        self._set_has_changes(False)
        self._refresh(reload_from_disk=True)

        geom = self.settings.get("window_geometry", "")
        if geom:
            try:
                self.restoreGeometry(bytes.fromhex(geom))
            except ValueError:
                logger.warning("Ignoring malformed window geometry")

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(12, 12, 12, 8)
        root.setSpacing(10)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.setHandleWidth(2)
        root.addWidget(splitter, stretch=1)

        # ---- LEFT: Servers ----
        server_group = QGroupBox("Servers")
        server_layout = QVBoxLayout(server_group)
        self.server_list = QListWidget()
        self.server_list.setFont(QFont("Segoe UI", 10))
        self.server_list.currentRowChanged.connect(self._on_server_selected)
        self._key_filter = _RefreshKeyFilter(lambda: self._refresh(reload_from_disk=True), self)
        self.server_list.installEventFilter(self._key_filter)
        server_layout.addWidget(self.server_list)

        self.delete_server_btn = QPushButton("🗑 Delete Server")
        self.delete_server_btn.setObjectName("danger")
        self.delete_server_btn.clicked.connect(self._on_delete_server)
        server_layout.addWidget(self.delete_server_btn)
        splitter.addWidget(server_group)

        # ---- RIGHT: Logins ----
        login_group = QGroupBox("Logins")
        login_layout = QVBoxLayout(login_group)
        self.login_list = QListWidget()
        self.login_list.setFont(QFont("Segoe UI", 10))
        login_layout.addWidget(self.login_list)

        self.delete_login_btn = QPushButton("🗑 Delete Login")
        self.delete_login_btn.setObjectName("danger")
        self.delete_login_btn.clicked.connect(self._on_delete_login)
        login_layout.addWidget(self.delete_login_btn)
        splitter.addWidget(login_group)

        splitter.setSizes([320, 300])

        # Save / cancel
        action_row = QHBoxLayout()
        self.path_lbl = QLabel("")
        self.path_lbl.setStyleSheet("color: #606080; font-size: 11px;")
        action_row.addWidget(self.path_lbl)
        action_row.addStretch()

        self.save_btn = QPushButton("💾  Save")
        self.save_btn.setObjectName("primary")
        self.save_btn.setToolTip(f"Back up {SETTINGS_FILE_NAME} and write the changes")
        self.save_btn.clicked.connect(self._on_save)
        action_row.addWidget(self.save_btn)

        self.cancel_btn = QPushButton("↩  Cancel")
        self.cancel_btn.setToolTip("Discard unsaved changes and reload from disk")
        self.cancel_btn.clicked.connect(lambda: self._refresh(reload_from_disk=True))
        action_row.addWidget(self.cancel_btn)
        root.addLayout(action_row)

        # Log output
        self.log_text = QTextEdit()
        self.log_text.setReadOnly(True)
        self.log_text.setMaximumHeight(90)
        root.addWidget(self.log_text)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    # ------------------------------------------------------------------
    # List management
    # ------------------------------------------------------------------

    def _refresh(self, reload_from_disk: bool = True):
        self.session.selected_index = self._current_row()
        try:
            names = self.session.refresh(reload_from_disk=reload_from_disk)
        except PathNotFound as e:
            logger.warning(str(e))
            QMessageBox.information(self, "File not found.", FILE_NOT_FOUND_MESSAGE)
            return
        except SettingsError as e:
            self._show_error(e)
            return

        if reload_from_disk:
            self._set_has_changes(False)
            self.path_lbl.setText(str(self.session.locator.resolved or ""))

        self.server_list.blockSignals(True)
        self.server_list.clear()
        self.server_list.addItems(names)
        self.server_list.blockSignals(False)

        if self.session.selected_index is not None:
            self.server_list.setCurrentRow(self.session.selected_index)
        self._show_logins_for_selected_server()
        self.status_bar.showMessage(f"{len(names)} server(s)")

    def _current_row(self) -> int | None:
        row = self.server_list.currentRow()
        return row if row >= 0 else None

    def _on_server_selected(self, row: int):
        self.session.selected_index = row if row >= 0 else None
        self._show_logins_for_selected_server()

    def _show_logins_for_selected_server(self):
        self.delete_login_btn.setEnabled(False)
        self.delete_server_btn.setEnabled(False)
        self.login_list.clear()

        item = self.server_list.currentItem()
        if item is None:
            return
        try:
            logins = self.session.list_logins_for(item.text())
        except SettingsError as e:
            logger.warning(str(e))
            return

        self.delete_server_btn.setEnabled(True)
        if logins:
            self.login_list.addItems(logins)
            self.login_list.setCurrentRow(0)
            self.delete_login_btn.setEnabled(True)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_delete_login(self):
        server_item = self.server_list.currentItem()
        login_item = self.login_list.currentItem()
        if server_item is None or login_item is None:
            return
        server, user = server_item.text(), login_item.text()
        if not self._confirm("Delete Login", f"Delete login '{user}' from '{server}'?"):
            return
        try:
            self.session.delete_login(server, user)
        except SettingsError as e:
            self._show_error(e)
            return
        self._set_has_changes(True)
        self._log(f"🗑 Deleted login '{user}' from '{server}'")
        self._show_logins_for_selected_server()

    def _on_delete_server(self):
        item = self.server_list.currentItem()
        if item is None:
            return
        server = item.text()
        if not self._confirm("Delete Server", f"Delete server '{server}' and all its logins?"):
            return
        try:
            self.session.delete_server(server)
        except SettingsError as e:
            self._show_error(e)
            return
        self._set_has_changes(True)
        self._log(f"🗑 Deleted server '{server}'")
        self._refresh(reload_from_disk=False)

    def _on_save(self):
        if self.settings.get("warn_if_studio_running", True):
            status = get_studio_status()
            if status.is_running:
                dlg = StudioRunningDialog(self, status=status, recheck_fn=get_studio_status)
                if dlg.exec() == 0:
                    return

        self.session.selected_index = self._current_row()
        try:
            backup = self.session.save()
        except SettingsError as e:
            self._show_error(e)
            return
        self._log(f"✅ Saved — previous file kept as {backup.name}")
        self._set_has_changes(False)
        self._refresh(reload_from_disk=False)

    def _confirm(self, title: str, text: str) -> bool:
        if not self.settings.get("confirm_before_delete", True):
            return True
        reply = QMessageBox.question(
            self, title, text,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
        )
        return reply == QMessageBox.StandardButton.Yes

    def _set_has_changes(self, value: bool):
        self.save_btn.setEnabled(value)
        self.cancel_btn.setEnabled(value)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _log(self, message: str):
        self.log_text.append(message)
        logger.info(message.strip())

    def _show_error(self, error: SettingsError):
        self._log(f"❌ {error.step} failed: {error}")
        self.status_bar.showMessage(f"{error.step.capitalize()} failed — check log")
        QMessageBox.warning(self, f"{error.step.capitalize()} failed", str(error))

    # ------------------------------------------------------------------
    # Window lifecycle
    # ------------------------------------------------------------------

    def closeEvent(self, event):
        geom = self.saveGeometry().toHex().data().decode()
        self.settings.set("window_geometry", geom)
        super().closeEvent(event)
