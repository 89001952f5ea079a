# main.py
import sys
import os

from PyQt6.QtCore import Qt, QDateTime, QSettings, QTimer, QUrl
from PyQt6.QtGui import QAction, QDesktopServices
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QFileDialog, QLabel, QMessageBox, QInputDialog, QPlainTextEdit,
    QPushButton, QToolButton, QLineEdit, QComboBox, QTabWidget, QMenu, QSplitter
)

from ui_styles import DARK_STYLE
from app_logic import EditorLogic
from curve_logic import format_bezier_text
from graph_renderer import draw_value_curve, draw_speed_curve
from preset_manager import SettingsStore
from ui_components import GraphCanvas, KeyframeTreeWidget, current_modifiers
from update_checker import UpdateChecker

APP_NAME = "Easeline"
APP_VERSION = "1.1.0"
GITHUB_REPO = "easeline/easeline"
PRESET_PLACEHOLDER = "Select a preset..."
SPEED_TAB, VALUE_TAB = 0, 1


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.settings = QSettings("EaselineTools", "EaselineEditor")
        self.store = SettingsStore(self.settings)
        self.logic = EditorLogic(self.store, current_modifiers)
        self.update_checker = UpdateChecker(self.store)
        self.last_directory = self.settings.value("last_directory", "")

        self.setWindowTitle(APP_NAME)
        self.setGeometry(100, 100, 760, 520)

        self.init_ui()
        self.connect_signals()
        self.log_message("Application started.")

        is_dark = self.settings.value("darkModeEnabled", True, type=bool)
        self.dark_mode_action.setChecked(is_dark)
        self.apply_styles(is_dark)

        saved_tab = self.logic.load_settings()
        self.refresh_curve_views()
        self.restore_tab(saved_tab)
        QTimer.singleShot(0, self.check_for_updates)

    def init_ui(self):
        self.open_action = QAction("&Open Keyframes...", self); self.open_action.triggered.connect(self.open_file)
        self.save_as_action = QAction("&Save As...", self); self.save_as_action.triggered.connect(self.save_file_as)
        exit_action = QAction("E&xit", self); exit_action.triggered.connect(self.close)
        self.dark_mode_action = QAction("&Dark Mode", self); self.dark_mode_action.setCheckable(True); self.dark_mode_action.toggled.connect(self.toggle_dark_mode)

        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("&File"); file_menu.addAction(self.open_action); file_menu.addAction(self.save_as_action); file_menu.addSeparator(); file_menu.addAction(exit_action)
        view_menu = menu_bar.addMenu("&View"); view_menu.addAction(self.dark_mode_action)

        splitter = QSplitter(Qt.Orientation.Horizontal); self.setCentralWidget(splitter)
        self.tree = KeyframeTreeWidget(self); splitter.addWidget(self.tree)

        right_panel = QWidget(); right_layout = QVBoxLayout(right_panel); right_layout.setContentsMargins(3, 3, 3, 3)
        self.speed_canvas = GraphCanvas(self.logic.speed_interaction)
        self.value_canvas = GraphCanvas(self.logic.value_interaction)
        self.tabs = QTabWidget()
        # Speed first, matching the usual motion-design workflow.
        self.tabs.addTab(self.speed_canvas, "Speed"); self.tabs.addTab(self.value_canvas, "Value")
        right_layout.addWidget(self.tabs, 1)

        button_row = QHBoxLayout()
        self.get_button = QPushButton("Get"); self.get_button.setToolTip("Get easing from keyframes")
        self.bezier_input = QLineEdit()
        self.apply_button = QPushButton("Apply"); self.apply_button.setToolTip("Apply easing")
        button_row.addWidget(self.get_button); button_row.addWidget(self.bezier_input, 1); button_row.addWidget(self.apply_button)
        right_layout.addLayout(button_row)

        preset_row = QHBoxLayout()
        self.preset_list = QComboBox()
        self.preset_menu_button = QToolButton(); self.preset_menu_button.setText("⋯"); self.preset_menu_button.setToolTip("Settings")
        preset_row.addWidget(self.preset_list, 1); preset_row.addWidget(self.preset_menu_button)
        right_layout.addLayout(preset_row)

        self.log_console = QPlainTextEdit(); self.log_console.setReadOnly(True); self.log_console.setFixedHeight(110); self.log_console.setObjectName("LogConsole")
        right_layout.addWidget(QLabel("<b>Console Log</b>")); right_layout.addWidget(self.log_console)
        splitter.addWidget(right_panel)
        splitter.setSizes([260, 500])

    def connect_signals(self):
        self.logic.document_changed.connect(self.on_document_changed)
        self.logic.curve_changed.connect(self.refresh_curve_views)
        self.logic.presets_updated.connect(self.populate_preset_list)
        self.logic.active_preset_changed.connect(self.on_active_preset_changed)
        self.logic.clipboard_requested.connect(lambda text: QApplication.clipboard().setText(text))
        self.logic.log_requested.connect(self.log_message)
        self.logic.error_occurred.connect(self.show_error_message)
        self.update_checker.log_requested.connect(self.log_message)

        self.speed_canvas.resized.connect(self.on_speed_canvas_resized)
        self.value_canvas.resized.connect(self.on_value_canvas_resized)
        self.tabs.currentChanged.connect(self.on_tab_changed)
        self.get_button.clicked.connect(self.logic.get_easing)
        self.apply_button.clicked.connect(self.apply_easing)
        self.bezier_input.editingFinished.connect(lambda: self.logic.set_curve_from_text(self.bezier_input.text()))
        self.preset_list.textActivated.connect(self.on_preset_activated)
        self.preset_menu_button.clicked.connect(self.show_preset_menu)

    # --- curve views ---

    def refresh_curve_views(self):
        self.bezier_input.blockSignals(True)
        self.bezier_input.setText(format_bezier_text(self.logic.state.bezier))
        self.bezier_input.blockSignals(False)
        draw_value_curve(self.value_canvas, self.logic.state.bezier, self.logic.value_config)
        draw_speed_curve(self.speed_canvas, self.logic.state.bezier, self.logic.speed_config)

    def on_value_canvas_resized(self, width, height):
        self.logic.value_config = self.logic.value_config.resized(width, height)
        self.refresh_curve_views()

    def on_speed_canvas_resized(self, width, height):
        self.logic.speed_config = self.logic.speed_config.resized(width, height)
        self.refresh_curve_views()

    def restore_tab(self, saved_tab):
        self.logic.is_initializing_tab = True
        if saved_tab is not None and 0 <= saved_tab < self.tabs.count():
            self.tabs.setCurrentIndex(saved_tab)
            self.logic.current_tab = saved_tab
        QTimer.singleShot(100, self.finish_tab_init)

    def finish_tab_init(self):
        self.logic.is_initializing_tab = False

    def on_tab_changed(self, index):
        self.refresh_curve_views()
        self.logic.set_current_tab(index)

    def apply_easing(self):
        self.logic.apply_easing()
        self.logic.save_tab_preference()

    # --- presets ---

    def populate_preset_list(self):
        self.preset_list.blockSignals(True)
        self.preset_list.clear()
        self.preset_list.addItem(PRESET_PLACEHOLDER)
        self.preset_list.insertSeparator(1)
        self.preset_list.addItems(self.logic.presets.sorted_names())
        self.preset_list.blockSignals(False)
        self.on_active_preset_changed(self.logic.active_preset or "")

    def on_active_preset_changed(self, name):
        self.preset_list.blockSignals(True)
        index = self.preset_list.findText(name) if name else -1
        self.preset_list.setCurrentIndex(index if index >= 0 else 0)
        self.preset_list.blockSignals(False)

    def on_preset_activated(self, name):
        if name != PRESET_PLACEHOLDER:
            self.logic.select_preset(name)

    def selected_preset_name(self):
        name = self.preset_list.currentText()
        return None if name == PRESET_PLACEHOLDER else name

    def show_preset_menu(self):
        menu = QMenu(self)
        menu.addAction("Save Preset...").triggered.connect(self.save_preset)
        menu.addSeparator()
        menu.addAction("Rename Preset").triggered.connect(self.rename_preset)
        menu.addAction("Delete Preset").triggered.connect(self.delete_preset)
        menu.addSeparator()
        menu.addAction("Import Presets").triggered.connect(lambda: self.logic.import_presets(QApplication.clipboard().text()))
        menu.addAction("Copy All Presets").triggered.connect(self.logic.export_presets)
        menu.addAction("Delete All Presets").triggered.connect(self.delete_all_presets)
        menu.addSeparator()
        menu.addAction("Copy Current Curve to Clipboard").triggered.connect(self.logic.copy_curve_to_clipboard)
        menu.addAction("Copy Keyframe Duration in ms").triggered.connect(self.logic.copy_keyframe_duration)
        menu.addAction("Copy Keyframe Values").triggered.connect(self.logic.copy_keyframe_values)
        menu.addAction("Copy All Keyframe Info").triggered.connect(self.logic.copy_all_keyframe_info)
        menu.addSeparator()
        apply_on_drag = menu.addAction("Apply when dragging handles"); apply_on_drag.setCheckable(True); apply_on_drag.setChecked(self.logic.apply_on_drag)
        apply_on_drag.triggered.connect(self.logic.toggle_apply_on_drag)
        menu.addSeparator()
        menu.addAction(f"{APP_NAME} Version {APP_VERSION}").setEnabled(False)
        menu.addAction("Get updates...").triggered.connect(lambda: QDesktopServices.openUrl(QUrl(f"https://github.com/{GITHUB_REPO}")))
        menu.exec(self.preset_menu_button.mapToGlobal(self.preset_menu_button.rect().bottomLeft()))

    def save_preset(self):
        name, ok = QInputDialog.getText(self, "Save Preset", "Enter preset name (max 30 chars):", text="My Preset")
        if ok and name.strip():
            if self.logic.save_preset(name):
                self.logic.select_preset(name)

    def rename_preset(self):
        selected = self.selected_preset_name()
        if not selected:
            self.log_message("Please select a preset to rename")
            return
        new_name, ok = QInputDialog.getText(self, "Rename Preset", "Enter new name (max 30 chars):", text=selected)
        if ok and new_name.strip() and new_name != selected:
            self.logic.rename_preset(selected, new_name)

    def delete_preset(self):
        selected = self.selected_preset_name()
        if not selected:
            self.log_message("Please select a preset to delete")
            return
        self.logic.delete_preset(selected)

    def delete_all_presets(self):
        count = len(self.logic.presets.presets)
        if count == 0:
            self.log_message("No presets to delete")
            return
        reply = QMessageBox.question(self, "Delete All Presets",
                                     f"Are you sure you want to delete ALL {count} presets?\n\nThis action cannot be undone.",
                                     QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                                     QMessageBox.StandardButton.No)
        if reply == QMessageBox.StandardButton.Yes:
            self.logic.delete_all_presets()

    # --- keyframe document ---

    def on_document_changed(self, file_path):
        self.setWindowTitle(f"{APP_NAME} - {file_path}" if file_path else APP_NAME)
        clean_path = (self.logic.current_file_path or "").replace(" *", "")
        if clean_path and os.path.exists(clean_path):
            self.last_directory = os.path.dirname(clean_path)
            self.settings.setValue("last_directory", self.last_directory)
        self.tree.populate(self.logic.document)
        self.on_tree_selection_changed()

    def on_tree_selection_changed(self):
        self.logic.set_selection(self.tree.selected_keyframe_ids())

    def open_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Keyframe Document", self.last_directory, "JSON Files (*.json)")
        if file_name:
            self.logic.load_file(file_name)

    def save_file_as(self):
        if self.logic.document is None:
            self.log_message("No data loaded to save.")
            return
        current_path = (self.logic.current_file_path or "").replace(" *", "")
        file_name, _ = QFileDialog.getSaveFileName(self, "Save As", current_path or self.last_directory, "JSON Files (*.json)")
        if file_name:
            if not file_name.lower().endswith('.json'): file_name += '.json'
            self.logic.save_file(file_name)

    # --- misc ---

    def check_for_updates(self):
        self.update_checker.check(GITHUB_REPO, APP_NAME, APP_VERSION)

    def log_message(self, message):
        timestamp = QDateTime.currentDateTime().toString("hh:mm:ss")
        self.log_console.appendPlainText(f"[{timestamp}] {message}")

    def show_error_message(self, title, message):
        QMessageBox.critical(self, title, message)
        self.log_message(f"ERROR: {title} - {message}")

    def toggle_dark_mode(self, checked):
        self.settings.setValue("darkModeEnabled", checked)
        self.apply_styles(checked)
        self.log_message(f"Dark Mode {'Enabled' if checked else 'Disabled'}.")

    def apply_styles(self, is_dark):
        QApplication.instance().setStyleSheet(DARK_STYLE if is_dark else "")
        self.speed_canvas.dark = self.value_canvas.dark = is_dark
        self.refresh_curve_views()


# --- Application Entry Point ---
def run():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    run()
