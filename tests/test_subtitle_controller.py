"""Tests for SubtitleController – probe, select, map and job log output."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from conftest import audio, sub, video
from subpick.controller.subtitle_controller import SubtitleController, SubtitleJob
from subpick.model.probe_result import ProbeResult
from subpick.model.selection import SelectionPolicy
from subpick.service.ffmpeg_service import FfmpegService
from subpick.service.job_log import JobLog

FILE = Path("/media/Show's Episode [01].mkv")


def make_ctrl(streams):
    ff = FfmpegService()
    ff.probe_file = MagicMock(return_value=ProbeResult(path=FILE, streams=tuple(streams)))
    ff.find_ffbin = MagicMock(return_value="ffmpeg")
    return SubtitleController(ffmpeg=ff)


@pytest.fixture
def log(qapp):
    return JobLog()


def test_match_with_interleaved_streams(log):
    ctrl = make_ctrl([video(0), audio(1), sub(2, title="Signs"), audio(3), sub(4, title="Full Dialogue")])
    job = ctrl.find_subtitle(FILE, SelectionPolicy(), log=log)
    assert job == SubtitleJob(
        file=FILE, absolute_index=4, relative_index=1, codec="ass", language="eng", keyword="keyword:dialogue",
    )
    assert "Found 2 subtitle streams in file" in log.text()
    assert "absolute index 4, subtitle-relative index 1" in log.text()


def test_as_variables(log):
    ctrl = make_ctrl([sub(3, title="")])
    job = ctrl.find_subtitle(FILE, SelectionPolicy(), log=log)
    assert job.as_variables() == {
        "subtitle_index": "3",
        "subtitle_relative_index": "0",
        "subtitle_codec": "ass",
        "subtitle_language": "eng",
        "subtitle_keyword": "single-candidate",
    }


def test_no_match_logs_available_streams(log):
    ctrl = make_ctrl([sub(0, title="Signs"), sub(1, title="Songs")])
    job = ctrl.find_subtitle(FILE, SelectionPolicy(keywords=("dialogue",), fallback_index=1), log=log)
    assert job is None
    text = log.text()
    assert "fallback-titled" in text
    assert 'Index 1: codec=ass, language=eng, title="Songs"' in text
    assert text.endswith("Skipping file due to no matching subtitles")
    assert any(lvl == "warn" for lvl, _ in log.lines)


def test_no_subtitles_logged(log):
    ctrl = make_ctrl([video(0), audio(1)])
    assert ctrl.find_subtitle(FILE, SelectionPolicy(), log=log) is None
    assert "No subtitle streams found in file" in log.text()


def test_given_probe_skips_ffprobe(qapp):
    ctrl = make_ctrl([])
    pr = ProbeResult(path=FILE, streams=(sub(5, title="x"),))
    job = ctrl.find_subtitle(FILE, SelectionPolicy(), probe=pr)
    assert job.absolute_index == 5
    ctrl.ffmpeg.probe_file.assert_not_called()


def test_prepare_burn_normalizes_output_name(tmp_path, log):
    ctrl = make_ctrl([video(0), sub(1, codec="subrip"), sub(2, title="Dialogue"), sub(3, title="Signs")])
    job = ctrl.find_subtitle(FILE, SelectionPolicy(), log=log)
    plan = ctrl.prepare_burn(job, tmp_path, video_codec="libx264", log=log)
    assert plan.output_file == tmp_path / "Show_s Episode _01.mkv"
    vf = plan.args[plan.args.index("-vf") + 1]
    assert vf == ctrl.ffmpeg.subtitle_filter(FILE, 1)
    assert vf.endswith(":si=1")
    assert plan.args[plan.args.index("-c:v") + 1] == "libx264"
    assert "Output file:" in log.text()


def test_scan_folder(tmp_path):
    for name in ["b.mkv", "a.MP4", "notes.txt", "c.srt"]:
        (tmp_path / name).write_text("")
    (tmp_path / "dir.mkv").mkdir()
    assert [p.name for p in make_ctrl([]).scan_folder(tmp_path)] == ["a.MP4", "b.mkv"]
