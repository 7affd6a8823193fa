"""Sensor snapshot, light calibration and eccentric session."""

import collections

from artkit import signals as S

from . import settings


class SensorSnapshot(collections.namedtuple(
        'SensorSnapshot', ('pot', 'motor', 'light'))):

    @classmethod
    def from_frame(cls, frame):
        return cls(frame['pot'], frame.get('motor', 0), frame['light'])


class LightCalibration:
    """Moving average of light readings against a latched baseline."""

    def __init__(self, n=settings.LIGHT_HISTORY,
                 threshold=settings.ECCENTRIC_THRESHOLD):
        self.history = S.MovingAverage(n)
        self.threshold = threshold
        self.baseline = 0.
        self.calibrated = False
        self.auto_done = False
        self.latest = 0

    @property
    def average(self):
        return self.history.mean

    @property
    def delta(self):
        return abs(self.average - self.baseline)

    @property
    def exceeded(self):
        return self.calibrated and self.delta > self.threshold

    def update(self, light):
        """Adds a reading, returns True when auto-calibration fires."""
        self.latest = light
        self.history(value=light)
        if self.auto_done or not self.history.full:
            return False
        self.baseline = self.history.mean
        self.auto_done = self.calibrated = True
        return True

    def calibrate(self):
        """Latches the current average (no automatic calibration after)."""
        if len(self.history):
            self.baseline = self.history.mean
        else:
            self.baseline = float(self.latest)
        self.auto_done = self.calibrated = True
        return self.baseline


def wrap_offset(secs, duration, margin=settings.OFFSET_MARGIN):
    """Wraps `secs` into a track of `duration` (unchanged if unknown)."""
    if not duration or duration <= 0:
        return secs
    return secs % max(duration - margin, margin)


class EccentricSession:
    """One continuous eccentric excursion, from lock to stop.

    `current_target` is not None exactly while a hop is in flight.
    """

    def __init__(self, n_tracks):
        self.n_tracks = n_tracks
        self.current_target = None
        self.is_self_mix = False
        self.offsets = [0.] * n_tracks
        self.next_index = 0
        self.hop_ms = 0
        self.hops = 0
        # main playhead and scheduler time when the hop in flight started
        self.main_mark = None

    def advance(self):
        """Returns the next track in round robin order."""
        index = self.next_index
        self.next_index = (index + 1) % self.n_tracks
        self.hops += 1
        return index

    def resume_offset(self, index, duration):
        return wrap_offset(self.offsets[index], duration)
