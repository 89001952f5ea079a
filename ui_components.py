# ui_components.py
from PyQt6.QtCore import Qt, QPointF, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPainterPath, QPen
from PyQt6.QtWidgets import QApplication, QWidget, QTreeWidget, QTreeWidgetItem, QAbstractItemView

from data_models import Modifiers
from ui_styles import THEME_COLORS

KEYFRAME_ID_ROLE = 1000
MIN_GRAPH_SIZE = 150


def current_modifiers():
    """Reads the keyboard state at the moment of the call, not from the mouse event."""
    mods = QApplication.keyboardModifiers()
    return Modifiers(shift=bool(mods & Qt.KeyboardModifier.ShiftModifier),
                     control=bool(mods & Qt.KeyboardModifier.ControlModifier))


class GraphCanvas(QWidget):
    """Paints the paths produced by graph_renderer and forwards mouse input to a graph interaction."""
    resized = pyqtSignal(int, int)

    def __init__(self, interaction, parent=None):
        super().__init__(parent)
        self.interaction = interaction
        self.paths = []
        self.dark = True
        self.setMinimumSize(MIN_GRAPH_SIZE, MIN_GRAPH_SIZE)

    # canvas capability used by graph_renderer
    def clear(self): self.paths = []
    def add_path(self, geometry, paint): self.paths.append((geometry, paint))
    def redraw(self): self.update()
    def theme_color(self, name): return THEME_COLORS[self.dark].get(name, "#ffffff")

    @staticmethod
    def to_painter_path(geometry):
        path = QPainterPath()
        for command in geometry.commands:
            kind, args = command[0], command[1:]
            if kind == "move": path.moveTo(*args)
            elif kind == "line": path.lineTo(*args)
            elif kind == "cubic": path.cubicTo(*args)
            elif kind == "ellipse":
                cx, cy, rx, ry = args
                path.addEllipse(QPointF(cx, cy), rx, ry)
        return path

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(self.theme_color("AlternateBase")))
        for geometry, paint in self.paths:
            if paint.stroke:
                painter.setPen(QPen(QColor(paint.color), paint.stroke_width))
                painter.setBrush(Qt.BrushStyle.NoBrush)
            else:
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QColor(paint.color))
            painter.drawPath(self.to_painter_path(geometry))
        painter.end()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.interaction.on_press(pos.x(), pos.y())
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.interaction.on_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.interaction.on_release(pos.x(), pos.y())
        else:
            super().mouseReleaseEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit(max(MIN_GRAPH_SIZE, self.width()), max(MIN_GRAPH_SIZE, self.height()))


class KeyframeTreeWidget(QTreeWidget):
    """Attributes and their keyframes. Selecting an attribute selects all of its keyframes."""
    def __init__(self, parent_window):
        super().__init__()
        self.parent_window = parent_window
        self.setHeaderLabels(["Attribute / Keyframe"])
        self.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.itemSelectionChanged.connect(self.parent_window.on_tree_selection_changed)

    def populate(self, document):
        self.blockSignals(True)
        try:
            selected = set(self.selected_keyframe_ids())
            self.clear()
            if document is None:
                return
            for path, keys in sorted(document.attributes.items()):
                attr_item = QTreeWidgetItem(self, [path])
                for key in keys:
                    keyframe_id = document.make_keyframe_id(path, key.frame)
                    label = f"Frame {key.frame}: {key.value:g}"
                    if key.right_handle is None and key.left_handle is None: label += " (no tangents)"
                    key_item = QTreeWidgetItem(attr_item, [label])
                    key_item.setData(0, KEYFRAME_ID_ROLE, keyframe_id)
                    if keyframe_id in selected: key_item.setSelected(True)
            self.expandAll()
        finally:
            self.blockSignals(False)

    def selected_keyframe_ids(self):
        ids = []
        for i in range(self.topLevelItemCount()):
            attr_item = self.topLevelItem(i)
            for j in range(attr_item.childCount()):
                key_item = attr_item.child(j)
                if key_item.isSelected() or attr_item.isSelected():
                    ids.append(key_item.data(0, KEYFRAME_ID_ROLE))
        return ids
