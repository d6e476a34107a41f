"""Shared fixtures: stream builders, a Qt core app and an isolated settings file."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication

from subpick import settings
from subpick.model.probe_stream import ProbeStream


def sub(index, codec="ass", lang="eng", title=None):
    return ProbeStream(index=index, codec_type="subtitle", codec_name=codec, language=lang, title=title)


def video(index):
    return ProbeStream(index=index, codec_type="video", codec_name="h264")


def audio(index, lang="jpn"):
    return ProbeStream(index=index, codec_type="audio", codec_name="aac", language=lang)


@pytest.fixture(scope="session")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture(autouse=True)
def settings_file(tmp_path):
    path = tmp_path / "subpick.ini"
    settings.use_settings_file(path)
    yield path
    settings.use_settings_file(None)
