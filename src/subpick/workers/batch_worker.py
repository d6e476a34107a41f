from __future__ import annotations
import subprocess
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from subpick.controller.subtitle_controller import SubtitleController
from subpick.model.selection import SelectionPolicy
from subpick.service.job_log import JobLog


def _stderr_text(raw) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", "replace")
    return (raw or "").strip()


class BatchWorker(QObject):
    """Hintergrund-Worker (nur Ausführung, keine UI)."""
    progress = Signal(int, str)       # percent, current file name
    matched = Signal(object)          # SubtitleJob oder BurnPlan
    skipped = Signal(str)             # file name
    log = Signal(str, str)            # level, text
    error = Signal(str)
    finished = Signal(int, int, int)  # processed, skipped, errors

    def __init__(
        self,
        files: List[Path],
        policy: SelectionPolicy,
        burn_dir: Optional[Path] = None,
        video_codec: str = "libx265",
        audio_codec: str = "copy",
        ctrl: Optional[SubtitleController] = None,
    ):
        super().__init__()
        self.files = files
        self.policy = policy
        self.burn_dir = burn_dir
        self.video_codec = video_codec
        self.audio_codec = audio_codec
        self._stop = False
        self._ctrl = ctrl or SubtitleController()

    def stop(self):
        self._stop = True

    def run(self):
        processed = 0
        skipped = 0
        errors = 0
        total = len(self.files)
        for i, f in enumerate(self.files, start=1):
            if self._stop:
                break
            job_log = JobLog()
            job_log.line_written.connect(self.log)
            try:
                self.progress.emit(int((i - 1) / total * 100), f.name)
                job = self._ctrl.find_subtitle(f, self.policy, log=job_log)
                if job is None:
                    skipped += 1
                    self.skipped.emit(f.name)
                elif self.burn_dir is not None:
                    plan = self._ctrl.prepare_burn(
                        job, self.burn_dir,
                        video_codec=self.video_codec, audio_codec=self.audio_codec, log=job_log,
                    )
                    self.matched.emit(plan)
                else:
                    self.matched.emit(job)
                processed += 1
            except subprocess.CalledProcessError as e:
                errors += 1
                detail = _stderr_text(e.stderr)
                self.error.emit(f"{f.name}: {e}" + (f" ({detail})" if detail else ""))
            except Exception as e:
                errors += 1
                self.error.emit(f"{f.name}: {e}")
            finally:
                self.progress.emit(int(i / total * 100), f.name)
        self.finished.emit(processed, skipped, errors)
