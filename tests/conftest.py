"""Shared fixtures: builders for framed subtitle streams and RMC sentences, and a fake ffmpeg-backed extractor."""

from __future__ import annotations

import logging
import struct
from logging.handlers import RotatingFileHandler
from typing import Callable, List, Optional

import pytest


def _rmc(
    time: str = "123519",
    status: str = "A",
    lat: str = "4807.038",
    ns: str = "N",
    lon: str = "01131.000",
    ew: str = "E",
    knots: str = "022.4",
    course: str = "084.4",
    date: str = "230394",
    talker: str = "GP",
) -> bytes:
    body = ",".join([time, status, lat, ns, lon, ew, knots, course, date, "003.1", "W"])
    return f"${talker}RMC,{body}*6A\r\n".encode("ascii")


def _frame(*payloads: bytes) -> bytes:
    return b"".join(struct.pack(">H", len(p)) + p for p in payloads)


class FakeStreamExtractor:
    """Stands in for StreamExtractor without running ffmpeg."""

    def __init__(self, timestamps: List[float], raw_stream: bytes = b"", error: Optional[Exception] = None):
        self.timestamps = timestamps
        self.raw_stream = raw_stream
        self.error = error
        self.dump_calls = 0

    def get_packet_timestamps(self, video_filepath: str) -> List[float]:
        if self.error is not None:
            raise self.error
        return list(self.timestamps)

    def dump_subtitle_stream(self, video_filepath: str) -> bytes:
        self.dump_calls += 1
        return self.raw_stream


@pytest.fixture
def rmc() -> Callable[..., bytes]:
    """Builds an RMC sentence; defaults are the classic 48.1173N 11.5167E example fix."""
    return _rmc


@pytest.fixture
def frame() -> Callable[..., bytes]:
    """Length-prefixes and concatenates payloads into a raw mov_text stream."""
    return _frame


@pytest.fixture
def fake_extractor():
    return FakeStreamExtractor


@pytest.fixture
def sample_stream() -> bytes:
    """Caption-only packet, a valid fix, then the same fix again."""
    return _frame(b"\x00\x0bhello world", _rmc(), _rmc())


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "clip.MP4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drops the handlers setup_logging installed on the root logger during a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
