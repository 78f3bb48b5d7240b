import cv2


class SaveGate:
    """Writes at most one frame per interval to a fixed path, overwriting it.

    ``last_save`` advances on every attempt, failed writes included, so a
    failing path is retried only once the next interval has elapsed.
    """

    def __init__(self, path, interval, start, logger, throttle):
        self.path = path
        self.interval = interval
        self.last_save = start
        self.logger = logger
        self.throttle = throttle

    def due(self, now):
        return now - self.last_save >= self.interval

    def maybe_save(self, frame, now) -> bool:
        if not self.due(now):
            return False

        try:
            saved = cv2.imwrite(self.path, frame)
        except cv2.error as e:
            saved = False
            self.logger.debug(f'imwrite raised: {e}')

        if saved:
            if self.throttle.allow('save_ok', now):
                self.logger.info(f'Saved image to {self.path}')
        elif self.throttle.allow('save_failed', now):
            self.logger.error(f'Failed to save image to {self.path}, check path permissions')

        self.last_save = now
        return True
