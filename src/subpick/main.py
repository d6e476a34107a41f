# src/subpick/main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QCoreApplication, QTimer

from subpick import settings
from subpick.controller.batch_controller import BatchController
from subpick.controller.subtitle_controller import BurnPlan, SubtitleController, SubtitleJob
from subpick.model.selection import SelectionPolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subpick",
        description="Find the subtitle stream to burn in (codec, language, title keywords, fallback position).",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="video files or folders")
    parser.add_argument("--codec", help="subtitle codec, exact match (default: ass)")
    parser.add_argument("--language", help="subtitle language, exact match (default: eng)")
    parser.add_argument("--keywords", help='comma-separated title keywords in priority order (default: "dialogue,full,complete")')
    parser.add_argument("--fallback-index", help='0-based position among codec/language matches, "disabled" or -1 to turn off')
    parser.add_argument("--burn-dir", type=Path, help="print the ffmpeg burn-in command writing into this folder")
    parser.add_argument("--config", type=Path, help="INI settings file instead of the per-user settings")
    parser.add_argument("--save-defaults", action="store_true", help="store the given selection options as new defaults")
    parser.add_argument("-q", "--quiet", action="store_true", help="no job log on stderr")
    return parser


def policy_from_args(args: argparse.Namespace) -> SelectionPolicy:
    policy = settings.default_policy()
    changes = {}
    if args.codec is not None:
        changes["codec"] = args.codec
    if args.language is not None:
        changes["language"] = args.language
    if args.keywords is not None:
        changes["keywords"] = settings.parse_keywords(args.keywords)
    if args.fallback_index is not None:
        changes["fallback_index"] = settings.parse_fallback_index(args.fallback_index)
    return replace(policy, **changes)


def collect_files(paths: List[Path], ctrl: SubtitleController) -> List[Path]:
    files: List[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(ctrl.scan_folder(p))
        else:
            files.append(p)
    return files


def format_result(obj) -> str:
    if isinstance(obj, BurnPlan):
        return " ".join(obj.args)
    job: SubtitleJob = obj
    return f"{job.file}\t{job.absolute_index}\t{job.relative_index}\t{job.keyword}"


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.config is not None:
        settings.use_settings_file(args.config)

    try:
        policy = policy_from_args(args)
    except ValueError as e:
        print(f"subpick: invalid option: {e}", file=sys.stderr)
        return 2
    if args.save_defaults:
        settings.save_policy(policy)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    ctrl = SubtitleController()
    files = collect_files(args.paths, ctrl)
    if not files:
        print("subpick: no video files found", file=sys.stderr)
        return 1

    video_codec, audio_codec = settings.burn_codecs()
    counts = {"matched": 0, "errors": 0}

    def on_matched(obj) -> None:
        counts["matched"] += 1
        print(format_result(obj), flush=True)

    def on_log(level: str, text: str) -> None:
        if not args.quiet or level == "error":
            print(f"[{level}] {text}", file=sys.stderr, flush=True)

    def on_error(text: str) -> None:
        counts["errors"] += 1
        print(f"[error] {text}", file=sys.stderr, flush=True)

    batch = BatchController(ctrl=ctrl)
    batch.matched.connect(on_matched)
    batch.log.connect(on_log)
    batch.error.connect(on_error)
    batch.finished.connect(lambda *_: app.quit())

    QTimer.singleShot(0, lambda: batch.start(
        files, policy, burn_dir=args.burn_dir, video_codec=video_codec, audio_codec=audio_codec,
    ))
    app.exec()
    batch.stop()

    if counts["errors"]:
        return 2
    return 0 if counts["matched"] else 1


if __name__ == "__main__":
    sys.exit(main())
