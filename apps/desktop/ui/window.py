"""
Library window: searchable list of tracked executables on the left, the
selected entry's details on the right.

All state is read from the tracker's projections; the window never keeps
its own copy of play time or running flags.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from playtracker.core.catalog.models import CatalogChange, GameEntry
from playtracker.core.errors import DuplicateNameError, LaunchError, StoreIOError, TrackerError
from playtracker.core.tracker import PlaytimeTracker

from .components import Card, DangerButton, GameListItem, PrimaryButton, SecondaryButton, StatusPill
from .theme import Theme

log = logging.getLogger(__name__)

ALL_YEARS = "All years"


class _Bridge(QObject):
    """Carries notifications from the reconciler thread onto the GUI thread."""
    catalog_changed = Signal()
    monitor_event = Signal(dict)
    monitor_error = Signal(str)


class EditDialog(QDialog):
    def __init__(self, entry: GameEntry, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Edit game")
        self.setMinimumWidth(400)

        form = QFormLayout(self)
        self.name_input = QLineEdit(entry.custom_name or "")
        self.name_input.setPlaceholderText(entry.name)
        form.addRow("Display name", self.name_input)

        self.cover_input = QLineEdit(entry.cover_url or "")
        self.cover_input.setPlaceholderText("https://…")
        form.addRow("Cover URL", self.cover_input)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        form.addRow(buttons)

    def values(self) -> tuple[str, str]:
        return self.name_input.text().strip(), self.cover_input.text().strip()


class MainWindow(QMainWindow):
    def __init__(self, tracker: PlaytimeTracker) -> None:
        super().__init__()
        self.setWindowTitle("PlayTracker")
        self.resize(1100, 760)
        self.setMinimumSize(800, 560)

        self.tracker = tracker
        self.theme = Theme("dark" if tracker.cfg.dark_mode else "light")

        self._bridge = _Bridge()
        self._bridge.catalog_changed.connect(self._render)
        self._bridge.monitor_event.connect(self._on_monitor_event)
        self._bridge.monitor_error.connect(self._on_monitor_error)

        self._unsubscribe = tracker.catalog.on_change(self._on_catalog_change)
        tracker.reconciler.on_event(self._bridge.monitor_event.emit)
        tracker.reconciler.on_error(self._bridge.monitor_error.emit)

        self._build_ui()
        self.setStyleSheet(self.theme.get_stylesheet())
        self._render()

        self._status_timer = QTimer(self)
        self._status_timer.timeout.connect(self._refresh_status)
        self._status_timer.start(800)

    def _build_ui(self) -> None:
        root = QWidget()
        self.setCentralWidget(root)
        main_layout = QVBoxLayout(root)
        main_layout.setContentsMargins(24, 24, 24, 24)
        main_layout.setSpacing(16)

        header = QHBoxLayout()
        header.setSpacing(12)
        title = QLabel("Library")
        title.setObjectName("TitleLabel")
        header.addWidget(title)
        header.addStretch()

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search games…")
        self.search_input.textChanged.connect(self._on_search)
        header.addWidget(self.search_input)

        self.year_combo = QComboBox()
        self.year_combo.currentTextChanged.connect(self._on_year)
        header.addWidget(self.year_combo)

        self.btn_add = PrimaryButton("Add game")
        self.btn_add.clicked.connect(self._add_game)
        header.addWidget(self.btn_add)
        main_layout.addLayout(header)

        content = QHBoxLayout()
        content.setSpacing(20)

        list_card = Card()
        self.game_list = QListWidget()
        self.game_list.currentItemChanged.connect(self._on_select)
        self.game_list.verticalScrollBar().valueChanged.connect(self._on_scroll)
        list_card.layout.addWidget(self.game_list)
        content.addWidget(list_card, 2)

        detail_card = Card()
        d = detail_card.layout
        self.detail_title = QLabel("Select a game")
        self.detail_title.setObjectName("SectionLabel")
        d.addWidget(self.detail_title)

        self.detail_status = StatusPill("Not running")
        d.addWidget(self.detail_status)

        self.detail_missing = QLabel("Executable not found on disk.")
        self.detail_missing.setObjectName("WarningLabel")
        self.detail_missing.hide()
        d.addWidget(self.detail_missing)

        self.detail_time = QLabel()
        self.detail_last = QLabel()
        self.detail_added = QLabel()
        self.detail_genres = QLabel()
        self.detail_path = QLabel()
        self.detail_path.setObjectName("HintLabel")
        self.detail_path.setWordWrap(True)
        self.detail_description = QLabel()
        self.detail_description.setWordWrap(True)
        for w in (self.detail_time, self.detail_last, self.detail_added, self.detail_genres,
                  self.detail_path, self.detail_description):
            d.addWidget(w)

        self.chk_remap = QCheckBox("Start controller remapper with this game")
        self.chk_remap.toggled.connect(self._toggle_remap)
        d.addWidget(self.chk_remap)

        d.addStretch()

        actions = QHBoxLayout()
        self.btn_play = PrimaryButton("Play")
        self.btn_play.clicked.connect(self._play)
        actions.addWidget(self.btn_play)
        self.btn_edit = SecondaryButton("Edit")
        self.btn_edit.clicked.connect(self._edit)
        actions.addWidget(self.btn_edit)
        self.btn_remove = DangerButton("Remove")
        self.btn_remove.clicked.connect(self._remove)
        actions.addWidget(self.btn_remove)
        d.addLayout(actions)
        content.addWidget(detail_card, 3)

        main_layout.addLayout(content, 1)

        self.status_label = QLabel()
        self.status_label.setObjectName("HintLabel")
        main_layout.addWidget(self.status_label)

    # Rendering

    def _on_catalog_change(self, change: CatalogChange) -> None:
        # Called on whichever thread mutated the catalog
        self._bridge.catalog_changed.emit()

    def _render(self) -> None:
        self._render_years()
        self._render_list()
        self._render_detail()

    def _render_years(self) -> None:
        years = [str(y) for y in self.tracker.list_view.available_years()]
        current = self.year_combo.currentText() or ALL_YEARS
        wanted = [ALL_YEARS, *years]
        if [self.year_combo.itemText(i) for i in range(self.year_combo.count())] == wanted:
            return
        self.year_combo.blockSignals(True)
        self.year_combo.clear()
        self.year_combo.addItems(wanted)
        chosen = current if current in wanted else ALL_YEARS
        self.year_combo.setCurrentText(chosen)
        self.year_combo.blockSignals(False)
        # The filter follows the combo when its year has disappeared
        self.tracker.list_view.set_year(None if chosen == ALL_YEARS else int(chosen))

    def _render_list(self) -> None:
        selected = self.tracker.detail_view.selected_id
        bar = self.game_list.verticalScrollBar()
        scroll = bar.value()

        # clear() moves the scroll bar, which must not trigger another page load mid-rebuild
        bar.blockSignals(True)
        self.game_list.blockSignals(True)
        self.game_list.clear()
        for entry in self.tracker.list_view.items():
            row = GameListItem(entry)
            item = QListWidgetItem()
            hint = row.sizeHint()
            hint.setHeight(max(hint.height(), 52))
            item.setSizeHint(hint)
            self.game_list.addItem(item)
            self.game_list.setItemWidget(item, row)
            if entry.id == selected:
                self.game_list.setCurrentItem(item)
        self.game_list.blockSignals(False)
        bar.setValue(scroll)
        bar.blockSignals(False)

    def _render_detail(self) -> None:
        view = self.tracker.detail_view.current()
        has = view is not None
        for w in (self.btn_play, self.btn_edit, self.btn_remove, self.chk_remap):
            w.setEnabled(has)

        if view is None:
            self.detail_title.setText("Select a game")
            self.detail_status.setText("Not running")
            self.detail_status.set_active(False)
            self.detail_missing.hide()
            for w in (self.detail_time, self.detail_last, self.detail_added, self.detail_genres,
                      self.detail_path, self.detail_description):
                w.setText("")
            return

        entry = view.entry
        self.detail_title.setText(entry.display_name)
        self.detail_status.setText("Playing" if entry.running else "Not running")
        self.detail_status.set_active(entry.running)
        self.detail_missing.setVisible(not view.file_exists)
        self.btn_play.setEnabled(view.file_exists)
        self.detail_time.setText(f"Time played: {view.play_time}")
        self.detail_last.setText(f"Last played: {view.last_played}")
        self.detail_added.setText(f"Added: {entry.added_date.astimezone():%x}")
        self.detail_genres.setText(", ".join(entry.genre_names))
        self.detail_path.setText(entry.path)
        self.detail_description.setText(entry.description or "")

        self.chk_remap.blockSignals(True)
        self.chk_remap.setChecked(entry.controller_remap)
        self.chk_remap.blockSignals(False)

    def _refresh_status(self) -> None:
        state = self.tracker.reconciler.get_state()
        text = f"Monitor {state.status.lower()} · {state.ticks} ticks"
        if state.dropped_ticks:
            text += f" · {state.dropped_ticks} dropped"
        if state.last_error:
            text += f" · last error: {state.last_error}"
        self.status_label.setText(text)

    # User input

    def _on_search(self, text: str) -> None:
        self.tracker.list_view.set_query(text)
        self._render_list()

    def _on_year(self, text: str) -> None:
        self.tracker.list_view.set_year(None if text in ("", ALL_YEARS) else int(text))
        self._render_list()

    def _on_scroll(self, value: int) -> None:
        bar = self.game_list.verticalScrollBar()
        if value >= bar.maximum() - 5 and self.tracker.list_view.has_more():
            self.tracker.list_view.extend()
            self._render_list()

    def _on_select(self, item: Optional[QListWidgetItem], _previous=None) -> None:
        if item is None:
            return
        row = self.game_list.itemWidget(item)
        if isinstance(row, GameListItem):
            try:
                self.tracker.detail_view.select(row.entry_id)
            except TrackerError as e:
                self._show_error(str(e))
            self._render_detail()

    def _selected_id(self) -> Optional[int]:
        return self.tracker.detail_view.selected_id

    def _add_game(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Add game", "", "Executables (*.exe);;All files (*)")
        if not path:
            return
        try:
            self.tracker.add_game(path)
        except DuplicateNameError as e:
            self._show_error(str(e))
        except StoreIOError as e:
            self._show_error(f"Added, but could not be saved: {e}")

    def _edit(self) -> None:
        entry_id = self._selected_id()
        if entry_id is None:
            return
        dialog = EditDialog(self.tracker.catalog.get(entry_id), self)
        if not dialog.exec():
            return
        name, cover = dialog.values()
        try:
            self.tracker.rename_and_cover(entry_id, name, cover)
        except StoreIOError as e:
            self._show_error(f"Saved in memory only: {e}")
        except TrackerError as e:
            self._show_error(str(e))

    def _toggle_remap(self, checked: bool) -> None:
        entry_id = self._selected_id()
        if entry_id is None:
            return
        try:
            self.tracker.set_controller_remap(entry_id, checked)
        except TrackerError as e:
            self._show_error(str(e))

    def _remove(self) -> None:
        view = self.tracker.detail_view.current()
        if view is None:
            return
        answer = QMessageBox.question(
            self,
            "Confirm removal",
            f"Are you sure you want to remove {view.entry.display_name}?",
        )
        if answer != QMessageBox.Yes:
            return
        try:
            self.tracker.remove_game(view.entry.id)
        except StoreIOError as e:
            self._show_error(f"Removed, but could not be saved: {e}")
        except TrackerError as e:
            self._show_error(str(e))

    def _play(self) -> None:
        entry_id = self._selected_id()
        if entry_id is None:
            return
        try:
            self.tracker.launch_game(entry_id)
        except LaunchError as e:
            self._show_error(str(e))
            self._render_detail()

    # Monitor callbacks (already on the GUI thread)

    def _on_monitor_event(self, evt: dict) -> None:
        log.info("%s: %s", evt.get("type"), evt.get("name"))

    def _on_monitor_error(self, msg: str) -> None:
        self.status_label.setText(f"ERROR: {msg}")

    def _show_error(self, msg: str) -> None:
        log.warning(msg)
        QMessageBox.warning(self, "PlayTracker", msg)

    def closeEvent(self, event) -> None:
        self._status_timer.stop()
        self._unsubscribe()
        super().closeEvent(event)
