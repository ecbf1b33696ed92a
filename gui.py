"""
GUI for ClipTrail
Provides a window for browsing and recalling clipboard history
"""
import sys
import time
from PyQt5.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QListWidget, QListWidgetItem, QPushButton, QLabel, QLineEdit,
    QMessageBox, QDialog, QTextEdit, QInputDialog
)
from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QFont

from clipboard import Clipboard
from config import Config


SECONDS_PER_DAY = 24 * 60 * 60


class HistoryEntryDialog(QDialog):
    """Dialog to show full history entry content"""

    def __init__(self, entry, parent=None):
        super().__init__(parent)
        self.entry = entry
        self.setWindowTitle(f"History Entry {entry.name}")
        self.setMinimumSize(600, 400)
        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout()

        time_label = QLabel(f"Copied at: {self.entry.get_display_time()}")
        time_label.setFont(QFont("Arial", 10, QFont.Bold))
        layout.addWidget(time_label)

        layout.addWidget(QLabel("Content:"))

        content_text = QTextEdit()
        content_text.setPlainText(self.entry.read().decode('utf-8', errors='replace'))
        content_text.setReadOnly(True)
        layout.addWidget(content_text)

        button_layout = QHBoxLayout()

        copy_btn = QPushButton("Copy to Clipboard")
        copy_btn.clicked.connect(self.accept)
        button_layout.addWidget(copy_btn)

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.reject)
        button_layout.addWidget(close_btn)

        layout.addLayout(button_layout)
        self.setLayout(layout)


class ClipTrailGUI(QMainWindow):
    """Main GUI window for ClipTrail"""

    def __init__(self, clipboard, config):
        super().__init__()
        self.config = config
        self.clipboard = clipboard
        self.init_ui()

        # Pick up entries written by other ClipTrail invocations
        self.update_timer = QTimer()
        self.update_timer.timeout.connect(self.refresh_history)
        self.update_timer.start(5000)

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle("ClipTrail - Clipboard History")
        self.setMinimumSize(800, 600)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout()
        central_widget.setLayout(layout)

        search_layout = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Type to search clipboard history...")
        self.search_input.textChanged.connect(self.on_search)
        search_layout.addWidget(QLabel("Search:"))
        search_layout.addWidget(self.search_input)
        layout.addLayout(search_layout)

        self.history_list = QListWidget()
        self.history_list.itemDoubleClicked.connect(self.on_item_double_clicked)
        self.history_list.setAlternatingRowColors(True)
        layout.addWidget(self.history_list)

        button_layout = QHBoxLayout()

        self.recall_btn = QPushButton("Recall Selected")
        self.recall_btn.clicked.connect(self.recall_selected)
        self.recall_btn.setEnabled(False)

        self.view_btn = QPushButton("View Full Content")
        self.view_btn.clicked.connect(self.view_selected)
        self.view_btn.setEnabled(False)

        self.cache_btn = QPushButton("Cache Clipboard")
        self.cache_btn.clicked.connect(self.cache_clipboard)

        self.prune_btn = QPushButton("Prune...")
        self.prune_btn.clicked.connect(self.prune_history)

        self.clear_btn = QPushButton("Clear History")
        self.clear_btn.clicked.connect(self.clear_history)

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.clicked.connect(self.refresh_history)

        for btn in (self.recall_btn, self.view_btn, self.cache_btn,
                    self.prune_btn, self.clear_btn, self.refresh_btn):
            button_layout.addWidget(btn)
        layout.addLayout(button_layout)

        self.status_label = QLabel("Ready")
        layout.addWidget(self.status_label)

        self.history_list.itemSelectionChanged.connect(self.on_selection_changed)

        self.refresh_history()

    def _item_text(self, entry):
        preview = entry.preview(80, 1, True).replace('\n', ' ')
        return f"[{entry.get_display_time()}] {preview}"

    def _populate(self, rows):
        self.history_list.clear()
        for _, entry in rows:
            try:
                text = self._item_text(entry)
            except (OSError, ValueError):
                text = f"[missing] {entry.name}"
            item = QListWidgetItem(text)
            item.setData(Qt.UserRole, entry.name)
            self.history_list.addItem(item)

    def refresh_history(self):
        """Reload the history list from disk"""
        if self.search_input.text():
            return

        current_selection = self.history_list.currentRow()
        self.clipboard.history.refresh()
        self._populate(enumerate(self.clipboard.history))

        if 0 <= current_selection < self.history_list.count():
            self.history_list.setCurrentRow(current_selection)

        self.status_label.setText(f"Total items: {self.clipboard.history.size()}")

    def on_search(self, query):
        """Handle search input"""
        if not query:
            self.refresh_history()
            return

        results = self.clipboard.history.search(query)
        self._populate(results)
        self.status_label.setText(f"Found {len(results)} matching items")

    def on_selection_changed(self):
        has_selection = self.history_list.currentItem() is not None
        self.recall_btn.setEnabled(has_selection)
        self.view_btn.setEnabled(has_selection)

    def _selected_index(self):
        current_item = self.history_list.currentItem()
        if not current_item:
            return None
        entry = self.clipboard.history.get(current_item.data(Qt.UserRole))
        if entry is None:
            return None
        return list(self.clipboard.history).index(entry)

    def recall_selected(self):
        """Copy the selected entry back to the clipboard"""
        index = self._selected_index()
        if index is None:
            return

        cache_first = self.config.get('auto_cache', False)
        if self.clipboard.recall(index, cache_first=cache_first):
            self.status_label.setText("Entry copied to clipboard")
            self.refresh_history()
        else:
            QMessageBox.warning(self, "Error", "Failed to copy entry to clipboard")

    def view_selected(self):
        """View full content of the selected entry"""
        index = self._selected_index()
        if index is None:
            return

        entry = self.clipboard.history.get(index)
        try:
            dialog = HistoryEntryDialog(entry, self)
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "Error", f"Failed to read entry: {e}")
            return

        if dialog.exec_() == QDialog.Accepted:
            self.recall_selected()

    def on_item_double_clicked(self, item):
        self.recall_selected()

    def cache_clipboard(self):
        """Store the current clipboard contents in the history"""
        if self.clipboard.cache():
            self.status_label.setText("Clipboard cached")
            self.refresh_history()
        else:
            QMessageBox.warning(self, "Error", "Failed to cache the clipboard")

    def prune_history(self):
        """Delete entries older than a number of days"""
        days, ok = QInputDialog.getDouble(
            self, "Prune History", "Delete entries older than (days):", 30.0, 0.0, 36500.0, 1
        )
        if not ok:
            return

        try:
            count = self.clipboard.history.delete_older_than(time.time() - days * SECONDS_PER_DAY)
        except OSError as e:
            QMessageBox.warning(self, "Error", str(e))
            return

        self.refresh_history()
        self.status_label.setText(f"Deleted {count} entries")

    def clear_history(self):
        """Clear all clipboard history"""
        reply = QMessageBox.question(
            self,
            "Clear History",
            "Are you sure you want to delete all clipboard history?\nThis action cannot be undone.",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No
        )

        if reply == QMessageBox.Yes:
            try:
                count = self.clipboard.history.delete_all()
            except OSError as e:
                QMessageBox.warning(self, "Error", str(e))
                return
            self.refresh_history()
            self.status_label.setText(f"History cleared ({count} files removed)")


def main(config=None):
    """Main entry point for GUI"""
    config = config or Config()
    app = QApplication(sys.argv)

    window = ClipTrailGUI(Clipboard.from_config(config), config)
    window.show()

    return app.exec_()


if __name__ == '__main__':
    sys.exit(main())
