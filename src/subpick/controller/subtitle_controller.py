# src/subpick/controller/subtitle_controller.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from subpick.model.probe_result import ProbeResult
from subpick.model.selection import Matched, SelectionPolicy
from subpick.model.video_item import is_video
from subpick.service.ffmpeg_service import FfmpegService
from subpick.service.filename_service import normalize_filename
from subpick.service.index_mapper import map_indices
from subpick.service.job_log import JobLog
from subpick.service.stream_selector import candidate_count, select


@dataclass(frozen=True)
class SubtitleJob:
    """Ergebnis für eine Datei: alles, was der Einbrenn-Schritt braucht."""
    file: Path
    absolute_index: int
    relative_index: int
    codec: str
    language: str
    keyword: str

    def as_variables(self) -> Dict[str, str]:
        return {
            "subtitle_index": str(self.absolute_index),
            "subtitle_relative_index": str(self.relative_index),
            "subtitle_codec": self.codec,
            "subtitle_language": self.language,
            "subtitle_keyword": self.keyword,
        }


@dataclass(frozen=True)
class BurnPlan:
    job: SubtitleJob
    output_file: Path
    args: List[str]


class SubtitleController:
    """Controller für Suche + Indexberechnung je Datei, plus Einbrenn-Argumente."""

    def __init__(self, ffmpeg: FfmpegService | None = None):
        self.ffmpeg = ffmpeg or FfmpegService()

    def scan_folder(self, folder: Path) -> List[Path]:
        return [p for p in sorted(folder.iterdir()) if p.is_file() and is_video(p)]

    def probe_file(self, file: Path) -> ProbeResult:
        return self.ffmpeg.probe_file(file)

    def find_subtitle(
        self,
        file: Path,
        policy: SelectionPolicy,
        log: Optional[JobLog] = None,
        probe: Optional[ProbeResult] = None,
    ) -> Optional[SubtitleJob]:
        """
        Sucht den passenden Untertitel-Stream. ``None`` heißt: Datei überspringen.
        Probe-Fehler (ffprobe fehlt, kaputte Datei) werden nicht abgefangen.
        """
        log = log or JobLog()
        log.info(f"Analyzing subtitle streams for: {file}")
        log.info(f"Looking for: {policy.describe()}")

        pr = probe or self.probe_file(file)
        subs = pr.subtitle_streams
        log.info(f"Found {len(subs)} subtitle streams in file")
        log.info(
            f"Found {candidate_count(pr.streams, policy)} streams matching "
            f"codec={policy.codec} and language={policy.language}"
        )

        result = select(pr.streams, policy)
        if not isinstance(result, Matched):
            detail = f", {result.detail}" if result.detail else ""
            log.warn(f"No matching subtitles found ({result.cause.value}{detail})")
            if result.diagnostics:
                log.info("Available subtitle streams:")
                for d in result.diagnostics:
                    log.info(f"  {d}")
            else:
                log.info("No subtitle streams found in file")
            log.info("Skipping file due to no matching subtitles")
            return None

        idx = map_indices(pr.streams, result.stream)
        log.info(
            f"Found subtitle at absolute index {idx.absolute_index}, "
            f"subtitle-relative index {idx.subtitle_relative_index} ({result.reason})"
        )
        return SubtitleJob(
            file=file,
            absolute_index=idx.absolute_index,
            relative_index=idx.subtitle_relative_index,
            codec=policy.codec,
            language=policy.language,
            keyword=str(result.reason),
        )

    def prepare_burn(
        self,
        job: SubtitleJob,
        out_dir: Path,
        video_codec: str = "libx265",
        audio_codec: str = "copy",
        log: Optional[JobLog] = None,
    ) -> BurnPlan:
        name = normalize_filename(job.file.stem)
        output_file = out_dir / f"{name}{job.file.suffix}"
        args = self.ffmpeg.build_burn_command(
            job.file, job.relative_index, output_file,
            video_codec=video_codec, audio_codec=audio_codec,
        )
        if log is not None:
            log.info(
                f"Burning {job.codec} {job.language} subtitles (index {job.absolute_index}, "
                f'relative {job.relative_index}) with keyword "{job.keyword}"'
            )
            log.info(f"Output file: {output_file}")
        return BurnPlan(job=job, output_file=output_file, args=args)
