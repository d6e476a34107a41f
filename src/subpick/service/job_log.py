from __future__ import annotations
from typing import List, Tuple

from PySide6.QtCore import QObject, Signal


class JobLog(QObject):
    """Protokoll eines Auswahl-Laufs; jede Zeile geht als Signal raus und bleibt gespeichert."""
    line_written = Signal(str, str)  # level, text

    def __init__(self, parent=None):
        super().__init__(parent)
        self.lines: List[Tuple[str, str]] = []

    def write(self, level: str, text: str) -> None:
        self.lines.append((level, text))
        self.line_written.emit(level, text)

    def info(self, text: str) -> None:
        self.write("info", text)

    def warn(self, text: str) -> None:
        self.write("warn", text)

    def error(self, text: str) -> None:
        self.write("error", text)

    def text(self) -> str:
        return "\n".join(t for _, t in self.lines)
