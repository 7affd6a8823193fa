"""Signals smooth and map raw sensor readings to control values."""

import collections

import numpy as np

from . import logic as L
from . import util


# value transformation
###############################################################################

class From(L.Signal):
    """Transforms from `src` to 0..1"""

    def init(self, src_min, src_max):
        pass

    def call(self, value):
        return (value - self.src_min) / (self.src_max - self.src_min)


class To(L.Signal):
    """Transforms from 0..1 to `dst`"""

    def init(self, dst_min, dst_max):
        pass

    def call(self, value):
        return value * (self.dst_max - self.dst_min) + self.dst_min


class Clip(L.Signal):
    """Clamps a value between min/max."""

    def init(self, min=0, max=1):
        pass

    def call(self, value):
        return util.clamp(value, self.min, self.max)


class PiecewiseLinear(L.Signal):
    """Maps through linear segments between `points` (x ascending).

    Values outside the first/last point are extrapolated from the outer
    segments, i.e. nothing is clamped.
    """

    def init(self, points):
        assert len(points) >= 2, points
        xs = [x for x, _ in points]
        assert xs == sorted(xs), points

    def call(self, value):
        for (x0, y0), (x1, y1) in zip(self.points[:-2], self.points[1:-1]):
            if value <= x1:
                return util.remap(value, x0, x1, y0, y1)
        (x0, y0), (x1, y1) = self.points[-2:]
        return util.remap(value, x0, x1, y0, y1)


# value transformation in time
###############################################################################

class MovingAverage(L.Signal):
    """Mean over the last `n` samples (fewer while the window fills up)."""

    def init(self, n):
        assert n > 0, n
        self.window = collections.deque(maxlen=n)

    def call(self, value):
        self.window.append(value)
        return self.mean

    @property
    def mean(self):
        if not self.window:
            return 0.
        return float(np.mean(self.window))

    @property
    def full(self):
        return len(self.window) == self.window.maxlen

    def __len__(self):
        return len(self.window)


class Exponential(L.Signal):
    """Exponential follower (alpha=1 to disable; .1 is a good value)."""

    def init(self, alpha=1, initial=0.):
        self.value = initial

    def call(self, value):
        self.value += (value - self.value) * self.alpha
        return self.value


class AsymExponential(L.Signal):
    """Exponential follower with different rates going up and down."""

    def init(self, up, down, initial=0.):
        self.value = initial

    def call(self, value):
        alpha = self.up if value > self.value else self.down
        self.value += (value - self.value) * alpha
        return self.value
