"""Sound sources and a small mixing graph, rendered block by block.

Sources are controlled from the event loop (`play()`, `rate()`, `jump()`, ...)
while `Mixer.render()` runs on the audio thread, hence the per-source locks.

A `MissingTrack` stands in for a file that could not be loaded: every method
is a no-op, so callers never need to check before issuing commands.
"""

import os
import threading

import numpy as np
import scipy.io.wavfile
import scipy.signal

from . import util


CHANNELS = 2


def int16_to_float(a):
    if a.dtype.name == 'int16':
        a = (a / 32768.0).astype(np.float32)
    elif a.dtype.name == 'int32':
        a = (a / 2147483648.0).astype(np.float32)
    elif a.dtype.name == 'uint8':
        a = ((a.astype(np.float32) - 128) / 128.0).astype(np.float32)
    return a.astype(np.float32)


def to_channels(wav, channels=CHANNELS):
    """Returns wav as (n, channels), duplicating/averaging as needed."""
    if wav.ndim == 1:
        wav = wav.reshape((-1, 1))
    if wav.shape[1] == channels:
        return wav
    mono = wav.mean(axis=1, keepdims=True)
    return np.repeat(mono, channels, axis=1)


class Track:
    """A sound file with a playhead that can run at variable rate."""

    loaded = True

    def __init__(self, wav, sample_rate, name=''):
        self.wav = to_channels(int16_to_float(np.asarray(wav)))
        self.sample_rate = sample_rate
        self.name = name
        self.lock = threading.Lock()
        self.pos = 0.
        self.speed = 1.
        self.playing = False
        self.looping = False

    def __repr__(self):
        return 'Track({}, {:.1f}s)'.format(self.name, self.duration())

    def play(self):
        with self.lock:
            self.looping = False
            self.playing = True

    def loop(self):
        with self.lock:
            self.looping = True
            self.playing = True

    def pause(self):
        with self.lock:
            self.playing = False

    def stop(self):
        with self.lock:
            self.playing = False
            self.pos = 0.

    def rate(self, rate):
        with self.lock:
            self.speed = max(0., float(rate))

    def jump(self, secs):
        with self.lock:
            n = len(self.wav)
            self.pos = util.clamp(secs * self.sample_rate, 0., n - 1.)

    def is_playing(self):
        return self.playing

    def current_time(self):
        return self.pos / self.sample_rate

    def duration(self):
        return len(self.wav) / self.sample_rate

    def render(self, frames, out_rate):
        """Returns (frames, channels) and advances the playhead."""
        with self.lock:
            if not self.playing or self.speed == 0:
                return None
            n = len(self.wav)
            step = self.speed * self.sample_rate / out_rate
            idx = self.pos + np.arange(frames) * step
            if self.looping:
                idx = idx % n
                valid = np.ones(frames, dtype=bool)
            else:
                valid = idx < n - 1
            i0 = np.clip(idx.astype(int), 0, n - 1)
            i1 = np.clip(i0 + 1, 0, n - 1)
            frac = (idx - i0).reshape((-1, 1))
            out = self.wav[i0] * (1 - frac) + self.wav[i1] * frac
            out[~valid] = 0
            self.pos += frames * step
            if self.looping:
                self.pos %= n
            elif self.pos >= n - 1:
                self.playing = False
                self.pos = 0.
            return out


class MissingTrack:
    """Placeholder for a track that is not available."""

    loaded = False

    def __init__(self, name=''):
        self.name = name

    def __repr__(self):
        return 'MissingTrack({})'.format(self.name)

    def play(self):
        pass

    def loop(self):
        pass

    def pause(self):
        pass

    def stop(self):
        pass

    def rate(self, rate):
        pass

    def jump(self, secs):
        pass

    def is_playing(self):
        return False

    def current_time(self):
        return 0.

    def duration(self):
        return None

    def render(self, frames, out_rate):
        return None


def load_track(path, logger=None, name=None):
    """Loads a WAV file, returns `MissingTrack` if that is not possible."""
    logger = logger or util.NoLogger()
    name = name or os.path.basename(path)
    if not os.path.exists(path):
        logger.warning('Missing track %s', path)
        return MissingTrack(name)
    try:
        sr, data = scipy.io.wavfile.read(path)
    except ValueError as e:
        logger.warning('Cannot read %s : %s', path, e)
        return MissingTrack(name)
    track = Track(data, sr, name=name)
    logger.info('Loaded %r', track)
    return track


class Gain:
    """Gain with linear ramps, e.g. `amp(0.05, 0.02)`."""

    def __init__(self, value=0.):
        self.value = self.target = value
        self.slope = 0.

    def amp(self, value, ramp_secs=0.):
        self.target = value
        if ramp_secs <= 0:
            self.value = value
            self.slope = 0.
        else:
            self.slope = (value - self.value) / ramp_secs

    def render(self, frames, out_rate):
        t = np.arange(1, frames + 1) / out_rate
        if self.slope == 0 or self.value == self.target:
            self.value = self.target
            return np.full(frames, self.value, dtype=np.float32)
        values = self.value + self.slope * t
        if self.slope > 0:
            values = np.minimum(values, self.target)
        else:
            values = np.maximum(values, self.target)
        self.value = float(values[-1])
        return values.astype(np.float32)


class Iir:
    """Per channel IIR filter keeping its state between blocks."""

    def __init__(self, b, a, channels=CHANNELS):
        self.b = b
        self.a = a
        zi = scipy.signal.lfilter_zi(b, a)
        self.zi = np.zeros((len(zi), channels))

    def __call__(self, data):
        data, self.zi = scipy.signal.lfilter(
            self.b, self.a, data, axis=0, zi=self.zi)
        return data


class HighPass(Iir):
    def __init__(self, hz, rate, order=2, channels=CHANNELS):
        b, a = scipy.signal.butter(order, hz, btype='high', fs=rate)
        super().__init__(b, a, channels)


class BandPass(Iir):
    """Band around `hz` with quality `res` (bandwidth hz/res)."""
    def __init__(self, hz, res, rate, order=2, channels=CHANNELS):
        half = hz / res / 2
        b, a = scipy.signal.butter(
            order, [hz - half, hz + half], btype='band', fs=rate)
        super().__init__(b, a, channels)


class NoiseSource:
    """Band passed white noise behind a ramped gain."""

    def __init__(self, rate, hz=2800, res=6, seed=None):
        self.rate = rate
        self.filter = BandPass(hz, res, rate)
        self.gain = Gain(0.)
        self.running = False
        self.lock = threading.Lock()
        self.rng = np.random.default_rng(seed)

    def start(self):
        with self.lock:
            self.running = True

    def amp(self, value, ramp_secs=0.):
        with self.lock:
            self.gain.amp(value, ramp_secs)

    def render(self, frames, out_rate):
        with self.lock:
            if not self.running:
                return None
            gain = self.gain.render(frames, out_rate)
            if not gain.any():
                return None
            noise = self.rng.uniform(-1, 1, size=(frames, CHANNELS))
            return self.filter(noise) * gain.reshape((-1, 1))


class Distortion:
    """arctan soft clipping, `amount` 0..1."""

    def __init__(self, amount=0.08):
        self.amount = amount

    def set(self, amount):
        self.amount = util.clamp(float(amount), 0., 1.)

    def __call__(self, data):
        drive = 1 + self.amount * 100
        return np.arctan(data * drive) / np.arctan(drive)


class Mixer:
    """Sums tracks through high pass + distortion, adds noise on top."""

    def __init__(self, rate, tracks=(), noise=None, distortion=None,
                 highpass_hz=80):
        self.rate = rate
        self.tracks = list(tracks)
        self.noise = noise
        self.distortion = distortion
        self.highpass = HighPass(highpass_hz, rate) if highpass_hz else None

    def render(self, frames):
        music = np.zeros((frames, CHANNELS), dtype=np.float32)
        for track in self.tracks:
            buf = track.render(frames, self.rate)
            if buf is not None:
                music += buf
        if self.highpass:
            music = self.highpass(music)
        if self.distortion:
            music = self.distortion(music)
        if self.noise:
            buf = self.noise.render(frames, self.rate)
            if buf is not None:
                music = music + buf
        return np.clip(music, -1, 1).astype(np.float32)
