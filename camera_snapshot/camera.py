from dataclasses import dataclass, field

import cv2

# Requested capture settings, YUYV 640x480 @ 30 fps with a single buffered frame
DEVICE_INDICES = (0, 1, 2, 3)
BACKEND = cv2.CAP_V4L2
PIXEL_FORMAT = 'YUYV'
FRAME_WIDTH = 640
FRAME_HEIGHT = 480
FRAME_RATE = 30
BUFFER_SIZE = 1

ACCESS_HINT = 'try: 1. sudo chmod 666 /dev/video0  2. close other programs using the camera'


class CameraError(RuntimeError):
    pass


class NoDeviceAvailable(CameraError):
    def __init__(self, indices, message=None):
        self.indices = tuple(indices)
        if message is None:
            devices = ', '.join(f'/dev/video{i}' for i in self.indices)
            message = f'Could not open any camera device ({devices}); {ACCESS_HINT}'
        super().__init__(message)


class EmptyTestFrame(NoDeviceAvailable):
    def __init__(self, index):
        self.index = index
        super().__init__((index,), f'Test capture on /dev/video{index} returned an empty frame')


def fourcc_to_str(code):
    code = int(code)
    if code <= 0:
        return ''
    return ''.join(chr((code >> 8 * i) & 0xFF) for i in range(4)).rstrip('\x00')


def is_empty(frame):
    return frame is None or frame.size == 0


@dataclass
class CameraConfigReport:
    """What the device accepted and what it reports back after configuration.

    ``applied`` maps each property name to the flag returned by
    ``VideoCapture.set``. A False flag is diagnostic only.
    """
    applied: dict = field(default_factory=dict)
    pixel_format: str = ''
    width: int = 0
    height: int = 0
    fps: float = 0.0

    @property
    def missing(self):
        return [name for name, ok in self.applied.items() if not ok]


class CameraHandle:
    def __init__(self, capture, index, report, buffer_size):
        self.capture = capture
        self.index = index
        self.report = report
        self.buffer_size = buffer_size

    @property
    def device(self):
        return f'/dev/video{self.index}'

    @property
    def pixel_format(self):
        return self.report.pixel_format

    @property
    def width(self):
        return self.report.width

    @property
    def height(self):
        return self.report.height

    @property
    def fps(self):
        return self.report.fps

    @property
    def is_open(self):
        return self.capture is not None

    def read(self):
        """Grab one frame, or None when the device returns nothing."""
        if self.capture is None:
            return None
        ret, frame = self.capture.read()
        if not ret or is_empty(frame):
            return None
        return frame

    def release(self):
        if self.capture is not None:
            self.capture.release()
            self.capture = None


def configure(capture, pixel_format, width, height, fps, buffer_size):
    report = CameraConfigReport()
    report.applied['pixel_format'] = bool(
        capture.set(cv2.CAP_PROP_FOURCC, cv2.VideoWriter_fourcc(*pixel_format)))
    report.applied['width'] = bool(capture.set(cv2.CAP_PROP_FRAME_WIDTH, width))
    report.applied['height'] = bool(capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height))
    report.applied['fps'] = bool(capture.set(cv2.CAP_PROP_FPS, fps))
    report.applied['buffer_size'] = bool(capture.set(cv2.CAP_PROP_BUFFERSIZE, buffer_size))

    report.pixel_format = fourcc_to_str(capture.get(cv2.CAP_PROP_FOURCC))
    report.width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
    report.height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
    report.fps = float(capture.get(cv2.CAP_PROP_FPS))
    return report


def open_camera(logger, indices=DEVICE_INDICES, backend=BACKEND, pixel_format=PIXEL_FORMAT,
                width=FRAME_WIDTH, height=FRAME_HEIGHT, fps=FRAME_RATE, buffer_size=BUFFER_SIZE):
    """Open the first device in ``indices`` that comes up, configure it and take a test frame.

    Probing stops at the first device that opens. If that device then fails
    the test capture it is released and the remaining indices are not tried.
    """
    capture = None
    opened_index = None
    for index in indices:
        candidate = cv2.VideoCapture(index, backend)
        if candidate.isOpened():
            capture = candidate
            opened_index = index
            logger.info(f'Opened camera device /dev/video{index}')
            break
        candidate.release()

    if capture is None:
        raise NoDeviceAvailable(indices)

    try:
        report = configure(capture, pixel_format, width, height, fps, buffer_size)
        handle = CameraHandle(capture, opened_index, report, buffer_size)
        logger.info(f'Camera reports {report.width}x{report.height} @ {report.fps:.1f} fps '
                    f'({report.pixel_format or "unknown format"})')
        if report.missing:
            logger.warning(f'Camera did not accept: {", ".join(report.missing)}')
        frame = handle.read()
    except BaseException:
        capture.release()
        raise

    if frame is None:
        handle.release()
        raise EmptyTestFrame(opened_index)

    return handle
