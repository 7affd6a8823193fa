import os
import tempfile
import unittest

import numpy as np
import scipy.io.wavfile

from . import mixer


RATE = 1000


def ramp_track(secs=2.):
    wav = np.linspace(0, 0.5, int(secs * RATE)).astype(np.float32)
    return mixer.Track(wav, RATE, name='ramp')


class TestTrack(unittest.TestCase):

    def test_playhead_follows_rate(self):
        track = ramp_track()
        self.assertIsNone(track.render(100, RATE))
        track.loop()
        track.rate(2.)
        out = track.render(100, RATE)
        self.assertEqual(out.shape, (100, mixer.CHANNELS))
        self.assertAlmostEqual(track.current_time(), 0.2)

    def test_jump_pause_stop(self):
        track = ramp_track()
        track.play()
        track.jump(1.5)
        self.assertAlmostEqual(track.current_time(), 1.5)
        track.pause()
        self.assertFalse(track.is_playing())
        self.assertAlmostEqual(track.current_time(), 1.5)
        track.stop()
        self.assertEqual(track.current_time(), 0.)
        self.assertAlmostEqual(track.duration(), 2.)

    def test_play_once_ends(self):
        track = ramp_track(secs=0.1)
        track.play()
        track.render(200, RATE)
        self.assertFalse(track.is_playing())

    def test_loop_wraps(self):
        track = ramp_track(secs=0.1)
        track.loop()
        track.render(150, RATE)
        self.assertTrue(track.is_playing())
        self.assertAlmostEqual(track.current_time(), 0.05)


class TestMissingTrack(unittest.TestCase):

    def test_everything_is_a_noop(self):
        track = mixer.MissingTrack('song1')
        self.assertFalse(track.loaded)
        for method in (track.play, track.loop, track.pause, track.stop):
            method()
        track.rate(2)
        track.jump(3)
        self.assertFalse(track.is_playing())
        self.assertIsNone(track.duration())
        self.assertEqual(track.current_time(), 0.)

    def test_load_track(self):
        with tempfile.TemporaryDirectory() as d:
            self.assertFalse(
                mixer.load_track(os.path.join(d, 'song1.wav')).loaded)
            path = os.path.join(d, 'song2.wav')
            scipy.io.wavfile.write(
                path, RATE, np.zeros(RATE, dtype=np.int16))
            track = mixer.load_track(path)
            self.assertTrue(track.loaded)
            self.assertAlmostEqual(track.duration(), 1.)


class TestGain(unittest.TestCase):

    def test_ramp_up_and_down(self):
        gain = mixer.Gain()
        gain.amp(0.04, 0.02)
        values = gain.render(40, RATE)
        self.assertAlmostEqual(values[9], 0.02)
        self.assertAlmostEqual(values[-1], 0.04)
        gain.amp(0, 0.)
        self.assertFalse(gain.render(10, RATE).any())


class TestMixer(unittest.TestCase):

    def test_silence_without_sources(self):
        m = mixer.Mixer(8000, tracks=[mixer.MissingTrack()],
                        noise=mixer.NoiseSource(8000, seed=1),
                        distortion=mixer.Distortion())
        out = m.render(256)
        self.assertEqual(out.shape, (256, mixer.CHANNELS))
        self.assertFalse(out.any())

    def test_noise_when_opened(self):
        noise = mixer.NoiseSource(8000, seed=1)
        noise.start()
        noise.amp(0.05)
        m = mixer.Mixer(8000, noise=noise)
        out = m.render(256)
        self.assertTrue(out.any())
        self.assertLessEqual(np.abs(out).max(), 1.)
