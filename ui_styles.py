# ui_styles.py

# Colours the graph canvases look up by role name.
THEME_COLORS = {
    True: {"Base": "#2e2e2e", "AlternateBase": "#252525", "Accent1": "#4aa3ff", "Text": "#e0e0e0"},
    False: {"Base": "#f0f0f0", "AlternateBase": "#2b2b2b", "Accent1": "#0078d7", "Text": "#202020"},
}

DARK_STYLE = """
    QWidget {
        background-color: #2e2e2e;
        color: #e0e0e0;
        font-size: 10pt;
    }
    QMainWindow {
        background-color: #2e2e2e;
    }
    QTabWidget::pane {
        border: 1px solid #444;
    }
    QTabBar::tab {
        background-color: #3e3e3e;
        color: #c0c0c0;
        padding: 4px 14px;
        border: 1px solid #555;
    }
    QTabBar::tab:selected {
        background-color: #0078d7;
        color: white;
    }
    QTreeWidget {
        background-color: #252525;
        color: #e0e0e0;
        border: 1px solid #444;
    }
    QTreeWidget::item:selected {
        background-color: #0078d7;
        color: white;
    }
    QLineEdit, QComboBox, QPlainTextEdit {
        background-color: #3e3e3e;
        color: #e0e0e0;
        border: 1px solid #555;
        border-radius: 3px;
        padding: 2px;
    }
    QComboBox QAbstractItemView {
        background-color: #3e3e3e;
        selection-background-color: #0078d7;
    }
    QPushButton, QToolButton {
        background-color: #4a4a4a;
        color: #e0e0e0;
        border: 1px solid #555;
        padding: 4px;
        border-radius: 3px;
    }
    QPushButton:hover, QToolButton:hover {
        background-color: #5a5a5a;
    }
    QPushButton:pressed, QToolButton:pressed {
        background-color: #6a6a6a;
    }
    QMenuBar, QMenu {
        background-color: #2e2e2e;
        color: #e0e0e0;
    }
    QMenuBar::item:selected, QMenu::item:selected {
        background-color: #0078d7;
    }
    QMenu::item:disabled {
        color: #808080;
    }
    QPlainTextEdit#LogConsole {
        background-color: #212121;
        color: #d0d0d0;
        font-family: Consolas, monospace;
        border: 1px solid #444;
    }
"""
