class Throttle:
    """Lets a repeated log line through at most once per period, per key."""

    def __init__(self, period=1.0):
        self.period = period
        self._last_emitted = {}

    def allow(self, key, now):
        last = self._last_emitted.get(key)
        if last is not None and now - last < self.period:
            return False
        self._last_emitted[key] = now
        return True
