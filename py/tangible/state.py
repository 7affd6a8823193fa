"""Sensor snapshot, reading session, lift state and hand baselines."""

import collections

from artkit import signals as S
from artkit import util

from . import settings


FRAME_KEYS = {'P1': 'photo1', 'P2': 'photo2', 'FSR': 'fsr'}


class SensorSnapshot(collections.namedtuple(
        'SensorSnapshot', ('photo1', 'photo2', 'fsr'))):

    @property
    def photo_avg(self):
        return (self.photo1 + self.photo2) / 2

    def merge(self, frame):
        """Keys missing from `frame` keep their previous value."""
        return self._replace(**{
            FRAME_KEYS[key]: value for key, value in frame.items()
            if key in FRAME_KEYS})


class ReadingSession:

    def __init__(self, text):
        self.text = text
        self.words = text.split(' ')
        self.speaking = False
        self.index = -1

    def set_index(self, index):
        assert -1 <= index < len(self.words), index
        self.index = index

    def index_for_char(self, char_index):
        """Index of the word containing `char_index`."""
        index = len(self.text[:char_index].split(' ')) - 1
        return util.clamp(index, 0, len(self.words) - 1)

    @property
    def progress(self):
        if len(self.words) < 2:
            return 0.
        return util.clamp(
            util.remap(self.index, 0, len(self.words) - 1, 0, 1), 0., 1.)


class LiftState:
    """One FSR press.

    The lifted word is latched at press time (None if no word was current);
    lifting starts once the hands move `dead_zone` above the photocell
    average at press time.
    """

    def __init__(self, start_avg, word_index, dead_zone=settings.LIFT_DEAD_ZONE,
                 span=settings.LIFT_RANGE, alpha=settings.LIFT_ALPHA):
        self.start_avg = start_avg
        self.lifted_index = word_index if word_index >= 0 else None
        self.dead_zone = dead_zone
        self.target_signal = S.From(0, span) | S.Clip()
        self.amount = S.Exponential(alpha=alpha)
        self.lifting = False
        self.target = 0.

    @property
    def lift_amount(self):
        return self.amount.value

    def update(self, photo_avg):
        if self.lifted_index is None:
            return
        distance = photo_avg - self.start_avg
        if distance > self.dead_zone:
            self.lifting = True
            self.target = self.target_signal(value=distance)

    def step(self):
        """Moves `lift_amount` towards `target` (once per rendered frame)."""
        return self.amount(value=self.target)


class HandBaseline:
    """Photocell readings without a hand, latched from the first bright frame."""

    def __init__(self, default=settings.BASELINE_DEFAULT,
                 latch=settings.BASELINE_LATCH):
        self.photo1 = self.photo2 = default
        self.latch = latch
        self.latched = False

    def update(self, photo1, photo2):
        """Returns True when the baselines are latched."""
        if self.latched or photo1 <= self.latch or photo2 <= self.latch:
            return False
        self.photo1, self.photo2 = photo1, photo2
        self.latched = True
        return True

    def ratio(self, photo1, photo2):
        """1 when only photocell 1 is covered, 0 when only photocell 2 is."""
        d1 = max(0, self.photo1 - photo1)
        d2 = max(0, self.photo2 - photo2)
        total = d1 + d2
        if total < 1:
            return .5
        return util.clamp(1 - d2 / total, 0., 1.)
