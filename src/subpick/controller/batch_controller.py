from __future__ import annotations
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QObject, Signal, QThread

from subpick.controller.subtitle_controller import SubtitleController
from subpick.model.selection import SelectionPolicy
from subpick.workers.batch_worker import BatchWorker

class BatchController(QObject):
    """Startet/überwacht die Untertitel-Suche über viele Dateien in einem QThread."""
    progress = Signal(int, str)       # percent, current file name
    matched = Signal(object)
    skipped = Signal(str)
    log = Signal(str, str)            # level, text
    error = Signal(str)
    finished = Signal(int, int, int)  # processed, skipped, errors

    def __init__(self, parent=None, ctrl: Optional[SubtitleController] = None):
        super().__init__(parent)
        self._ctrl = ctrl
        self._thread: QThread | None = None
        self._worker: BatchWorker | None = None

    def start(
        self,
        files: List[Path],
        policy: SelectionPolicy,
        burn_dir: Optional[Path] = None,
        video_codec: str = "libx265",
        audio_codec: str = "copy",
    ):
        self.stop()  # Sicherheit, falls noch läuft
        self._thread = QThread(self)
        self._worker = BatchWorker(
            files=files, policy=policy, burn_dir=burn_dir,
            video_codec=video_codec, audio_codec=audio_codec, ctrl=self._ctrl,
        )
        self._worker.moveToThread(self._thread)

        self._thread.started.connect(self._worker.run)
        self._worker.progress.connect(self.progress)
        self._worker.matched.connect(self.matched)
        self._worker.skipped.connect(self.skipped)
        self._worker.log.connect(self.log)
        self._worker.error.connect(self.error)
        self._worker.finished.connect(self._on_worker_finished)

        self._thread.start()

    def stop(self):
        if self._worker:
            self._worker.stop()
        if self._thread:
            self._thread.quit()
            self._thread.wait()
        self._thread = None
        self._worker = None

    def _on_worker_finished(self, processed: int, skipped: int, errors: int):
        self.finished.emit(processed, skipped, errors)
        self.stop()
