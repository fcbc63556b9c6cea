"""
Studio Running Dialog
Shown when a save is attempted while Management Studio is still open.
Studio overwrites SqlStudio.bin on exit, so the user is asked to close it
and click "Check Again", or save anyway.
"""

from __future__ import annotations
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QFrame,
)
from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QFont

from core.studio_status import StudioStatus

FORCED_RESULT = 2


class StudioRunningDialog(QDialog):

    def __init__(self, parent=None, status: StudioStatus | None = None, recheck_fn=None):
        super().__init__(parent)
        self.status = status or StudioStatus()
        self.recheck_fn = recheck_fn  # Callable[[], StudioStatus]
        self.setWindowTitle("Close Management Studio")
        self.setModal(True)
        self.setMinimumWidth(420)
        self._build_ui()
        self._refresh_status(self.status)

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setSpacing(14)
        layout.setContentsMargins(20, 20, 20, 20)

        header = QLabel(
            "⚠️  SQL Server Management Studio is running. It rewrites SqlStudio.bin "
            "when it exits, which would undo these changes."
        )
        header.setFont(QFont("Segoe UI", 11, QFont.Weight.Medium))
        header.setWordWrap(True)
        layout.addWidget(header)

        self.pid_label = QLabel("")
        self.pid_label.setStyleSheet(
            "background: #2a1818; color: #ff8080; border-radius: 4px;"
            "padding: 6px 10px; font-family: 'Consolas', monospace;"
        )
        layout.addWidget(self.pid_label)

        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #5ce05c; font-weight: bold;")
        layout.addWidget(self.status_label)

        sep = QFrame()
        sep.setFrameShape(QFrame.Shape.HLine)
        sep.setStyleSheet("color: #333;")
        layout.addWidget(sep)

        btn_row = QHBoxLayout()
        self.recheck_btn = QPushButton("🔄  Check Again")
        self.recheck_btn.clicked.connect(self._on_recheck)

        self.proceed_btn = QPushButton("💾  Save Anyway")
        self.proceed_btn.setStyleSheet("background: #c04040; color: white;")
        self.proceed_btn.clicked.connect(self._on_force_proceed)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)

        btn_row.addWidget(self.recheck_btn)
        btn_row.addStretch()
        btn_row.addWidget(self.proceed_btn)
        btn_row.addWidget(cancel_btn)
        layout.addLayout(btn_row)

    def _refresh_status(self, status: StudioStatus):
        if not status.is_running:
            self.pid_label.setVisible(False)
            self.status_label.setText("✅ Management Studio is closed — you can save.")
            self.proceed_btn.setVisible(False)
            QTimer.singleShot(1200, self.accept)
        else:
            self.status_label.setText("")
            self.pid_label.setText(f"  Ssms.exe   (PID: {', '.join(str(p) for p in status.process_pids)})")

    def _on_recheck(self):
        if self.recheck_fn:
            self._refresh_status(self.recheck_fn())

    def _on_force_proceed(self):
        self.done(FORCED_RESULT)