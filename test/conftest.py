import cv2
import numpy as np
import pytest


class RecordingLogger:
    def __init__(self):
        self.records = []

    def _log(self, level, message):
        self.records.append((level, message))

    def debug(self, message):
        self._log('debug', message)

    def info(self, message):
        self._log('info', message)

    def warning(self, message):
        self._log('warning', message)

    def error(self, message):
        self._log('error', message)

    def fatal(self, message):
        self._log('fatal', message)

    def messages(self, level):
        return [m for lvl, m in self.records if lvl == level]


class FakeCapture:
    def __init__(self, bench, index, backend):
        self.bench = bench
        self.index = index
        self.backend = backend
        self.props = {}
        self.released = False

    def isOpened(self):
        return self.index in self.bench.present

    def set(self, prop, value):
        if self.bench.set_error is not None:
            raise self.bench.set_error
        if prop in self.bench.rejected:
            return False
        self.props[prop] = value
        return True

    def get(self, prop):
        return self.props.get(prop, 0)

    def read(self):
        if self.bench.read_error is not None:
            raise self.bench.read_error
        frames = self.bench.frames.get(self.index)
        if not frames:
            return True, self.bench.default_frame.copy()
        frame = frames.pop(0)
        if frame is None:
            return False, None
        return True, frame

    def release(self):
        self.released = True


class CameraBench:
    """Stands in for cv2.VideoCapture, with a configurable set of present devices."""

    def __init__(self):
        self.present = set()
        self.rejected = set()
        self.read_error = None
        self.set_error = None
        self.frames = {}
        self.captures = []
        self.default_frame = np.full((480, 640, 3), 127, dtype=np.uint8)

    @property
    def attempted(self):
        return [c.index for c in self.captures]

    def __call__(self, index, backend=cv2.CAP_ANY):
        capture = FakeCapture(self, index, backend)
        self.captures.append(capture)
        return capture


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def bench(monkeypatch):
    camera_bench = CameraBench()
    monkeypatch.setattr(cv2, 'VideoCapture', camera_bench)
    return camera_bench


@pytest.fixture
def frame():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(48, 64, 3), dtype=np.uint8)
