import random
import unittest

from artkit import mixer
from artkit import scheduler

from . import control
from . import settings


class FakeTrack:

    loaded = True

    def __init__(self, name, duration=10.):
        self.name = name
        self.playing = False
        self.time = 0.
        self.speed = 1.
        self._duration = duration

    def play(self):
        self.playing = True

    def loop(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def stop(self):
        self.playing = False
        self.time = 0.

    def rate(self, rate):
        self.speed = rate

    def jump(self, secs):
        self.time = secs

    def is_playing(self):
        return self.playing

    def current_time(self):
        return self.time

    def duration(self):
        return self._duration


class FakeNoise:

    def __init__(self):
        self.started = False
        self.amps = []

    def start(self):
        self.started = True

    def amp(self, value, ramp_secs=0.):
        self.amps.append((value, ramp_secs))


class FakeDistortion:

    def __init__(self):
        self.amounts = []

    def set(self, amount):
        self.amounts.append(amount)


def frame(pot=600, light=100):
    return dict(pot=pot, motor=0, light=light)


class TestHopDuration(unittest.TestCase):

    def test_examples(self):
        self.assertEqual(control.hop_duration_ms(1.), 2000)
        self.assertEqual(control.hop_duration_ms(2.), 1000)
        self.assertEqual(control.hop_duration_ms(.1), 2800)
        self.assertEqual(control.hop_duration_ms(3.), 667)
        self.assertEqual(control.hop_duration_ms(10.), 667)
        self.assertEqual(control.hop_duration_ms(0), 2800)

    def test_monotonic_and_clamped(self):
        rates = [r / 100 for r in range(0, 400)]
        durations = [control.hop_duration_ms(r) for r in rates]
        for a, b in zip(durations, durations[1:]):
            self.assertGreaterEqual(a, b)
        for d in durations:
            self.assertGreaterEqual(d, 500)
            self.assertLessEqual(d, 2800)


class TurntableTestCase(unittest.TestCase):

    def setUp(self):
        self.sched = scheduler.ManualScheduler()
        self.tracks = [FakeTrack('song{}'.format(i + 1)) for i in range(4)]
        self.hops = []
        self.tt = control.Turntable(
            self.tracks, scheduler=self.sched, rng=random.Random(1),
            on_hop=lambda index, hop_ms: self.hops.append((index, hop_ms)))

    @property
    def main(self):
        return self.tracks[0]

    def start_locked(self):
        self.tt.on_frame(frame())
        self.assertTrue(self.tt.lock())


class TestTransport(TurntableTestCase):

    def test_rate_follows_pot(self):
        for pot, rate in ((10, .1), (305, .55), (600, 1.), (1023, 2.)):
            self.tt.on_frame(frame(pot=pot))
            self.assertAlmostEqual(self.tt.rate, rate)
        self.assertAlmostEqual(self.main.speed, 2.)

    def test_idle_pot_pauses(self):
        self.tt.on_frame(frame(pot=600))
        self.assertTrue(self.tt.playing)
        self.assertTrue(self.main.playing)
        self.tt.on_frame(frame(pot=15))
        self.assertFalse(self.tt.playing)
        self.assertFalse(self.main.playing)

    def test_toggle(self):
        self.tt.toggle_music()
        self.assertTrue(self.main.playing)
        self.tt.toggle_music()
        self.assertFalse(self.main.playing)

    def test_auto_calibration_once(self):
        for _ in range(30):
            self.tt.on_frame(frame(pot=15, light=100))
        self.assertTrue(self.tt.light.calibrated)
        self.assertEqual(self.tt.light.baseline, 100.)
        for _ in range(30):
            self.tt.on_frame(frame(pot=15, light=900))
        self.assertEqual(self.tt.light.baseline, 100.)
        self.assertFalse(self.tt.locked)


class TestLock(TurntableTestCase):

    def test_light_delta_locks(self):
        for _ in range(30):
            self.tt.on_frame(frame(light=100))
        self.assertFalse(self.tt.locked)
        for _ in range(8):
            self.tt.on_frame(frame(light=400))
        self.assertFalse(self.tt.locked)
        self.tt.on_frame(frame(light=400))
        self.assertTrue(self.tt.locked)
        # latched even if light returns
        for _ in range(30):
            self.tt.on_frame(frame(light=100))
        self.assertTrue(self.tt.locked)

    def test_manual_lock_needs_transport(self):
        self.assertFalse(self.tt.lock())
        self.assertFalse(self.tt.locked)
        self.assertEqual(self.sched.pending(), 0)
        self.start_locked()
        self.assertFalse(self.tt.lock())

    def test_round_robin(self):
        self.start_locked()
        for _ in range(7):
            self.sched.advance(2.)
        self.assertEqual([index for index, _ in self.hops],
                         [0, 1, 2, 3, 0, 1, 2, 3])
        self.assertEqual({hop_ms for _, hop_ms in self.hops}, {2000})

    def test_one_pending_hop(self):
        self.start_locked()
        with self.assertRaises(AssertionError):
            self.tt._arm(0, self.tt._hop)
        self.sched.advance(2.)
        self.assertIsNotNone(self.tt.hop_handle)

    def test_hop_duration_follows_rate(self):
        self.tt.on_frame(frame(pot=1023))
        self.tt.lock()
        self.sched.advance(1.)
        self.assertEqual(self.hops, [(0, 1000), (1, 1000)])


class TestHops(TurntableTestCase):

    def test_self_mix(self):
        self.main.time = 5.
        self.start_locked()
        self.assertEqual(self.tt.display_index(), 0)
        self.assertTrue(self.tt.session.is_self_mix)
        self.assertEqual(self.main.time, 0.)
        self.assertGreaterEqual(self.main.speed, .85)
        self.assertLessEqual(self.main.speed, 1.15)
        self.sched.advance(2.)
        self.assertEqual(self.tt.session.offsets[0], 2.)
        self.assertEqual(self.main.time, 7.)
        self.assertEqual(self.main.speed, 1.)

    def test_cross_hop(self):
        self.tracks[2] = self.tt.tracks[2] = mixer.MissingTrack('song3')
        self.start_locked()
        self.sched.advance(2.)
        song2 = self.tracks[1]
        self.assertEqual(self.tt.display_index(), 1)
        self.assertFalse(self.tt.session.is_self_mix)
        self.assertFalse(self.main.playing)
        self.assertTrue(song2.playing)
        self.assertGreaterEqual(song2.speed, .9)
        self.assertLessEqual(song2.speed, 1.2)
        self.sched.advance(2.)
        self.assertFalse(song2.playing)
        self.assertTrue(self.main.playing)
        self.assertEqual(self.main.time, 4.)
        self.assertEqual(self.tt.session.offsets[1], 2.)
        self.assertEqual(self.tt.display_index(), 2)

    def test_revisit_continues(self):
        self.start_locked()
        for _ in range(5):
            self.sched.advance(2.)
        # second visit of song2 starts where the first one ended
        self.assertEqual(self.hops[-1][0], 1)
        self.assertEqual(self.tracks[1].time, 2.)

    def test_missing_target_is_silent(self):
        self.tracks[2] = mixer.MissingTrack('song3')
        self.tt.tracks[2] = self.tracks[2]
        self.start_locked()
        self.sched.advance(4.)
        self.assertEqual(self.tt.display_index(), 2)
        self.assertTrue(self.main.playing)
        self.sched.advance(2.)
        self.assertEqual([index for index, _ in self.hops], [0, 1, 2, 3])

    def test_missing_main_keeps_rotating(self):
        self.tracks[0] = self.tt.tracks[0] = mixer.MissingTrack('song1')
        self.start_locked()
        for _ in range(4):
            self.sched.advance(2.)
        self.assertEqual([index for index, _ in self.hops], [0, 1, 2, 3, 0])


class TestStop(TurntableTestCase):

    def test_stop_cancels_hop(self):
        self.start_locked()
        self.sched.advance(1.)
        self.tt.stop_eccentric()
        self.assertFalse(self.tt.locked)
        self.assertIsNone(self.tt.hop_handle)
        self.assertEqual(self.sched.pending(), 0)
        self.sched.advance(10.)
        self.assertEqual(len(self.hops), 1)
        self.assertEqual(self.tt.display_index(), 0)

    def test_stop_during_cross_hop_resumes_main(self):
        self.start_locked()
        self.sched.advance(3.)
        self.assertTrue(self.tracks[1].playing)
        self.tt.stop_eccentric()
        self.assertFalse(self.tracks[1].playing)
        self.assertTrue(self.main.playing)
        self.assertEqual(self.tt.display_index(), 0)

    def test_stop_during_self_mix_resumes_main_playhead(self):
        self.main.time = 5.
        self.start_locked()
        self.sched.advance(.5)
        self.assertTrue(self.tt.session.is_self_mix)
        self.tt.stop_eccentric()
        self.assertEqual(self.main.time, 5.5)
        self.assertEqual(self.main.speed, 1.)
        self.assertTrue(self.main.playing)
        self.assertEqual(self.sched.pending(), 0)

    def test_stop_during_self_mix_without_main(self):
        self.tracks[0] = self.tt.tracks[0] = mixer.MissingTrack('song1')
        self.start_locked()
        self.tt.stop_eccentric()
        self.assertFalse(self.tt.locked)
        self.assertEqual(self.sched.pending(), 0)

    def test_idle_pot_tears_down(self):
        self.start_locked()
        self.sched.advance(3.)
        self.tt.on_frame(frame(pot=15))
        self.assertFalse(self.tt.playing)
        self.assertFalse(self.tt.locked)
        self.assertFalse(self.main.playing)
        self.assertFalse(self.tracks[1].playing)
        self.assertEqual(self.sched.pending(), 0)
        self.sched.advance(10.)
        self.assertEqual(len(self.hops), 2)

    def test_toggle_off_tears_down(self):
        self.start_locked()
        self.tt.toggle_music()
        self.assertFalse(self.tt.locked)
        self.assertFalse(self.main.playing)


class TestScratch(TurntableTestCase):

    def setUp(self):
        super().setUp()
        self.noise = FakeNoise()
        self.distortion = FakeDistortion()
        self.tt.noise = self.noise
        self.tt.distortion = self.distortion

    def test_scratch_perturbs_audible_track(self):
        self.start_locked()
        self.assertTrue(self.noise.started)
        self.main.time = 1.
        self.sched.advance(.12)
        self.assertGreaterEqual(self.main.speed, .65)
        self.assertLessEqual(self.main.speed, 1.35)
        self.assertIn(round(self.main.time, 2), (.94, .97, 1.03, 1.06))
        value, ramp = self.noise.amps[-1]
        self.assertGreaterEqual(value, .02)
        self.assertLessEqual(value, .06)
        self.assertEqual(ramp, settings.NOISE_ATTACK)
        self.sched.advance(.1)
        self.assertIn((0, settings.NOISE_RELEASE), self.noise.amps)

    def test_position_floor(self):
        self.start_locked()
        self.main.time = 0.
        self.sched.advance(.12)
        self.assertGreaterEqual(self.main.time, settings.SCRATCH_MIN_POS)

    def test_distortion_bursts(self):
        self.start_locked()
        self.sched.advance(10.)
        bursts = [a for a in self.distortion.amounts
                  if a != settings.DISTORTION_DEFAULT]
        self.assertTrue(bursts)
        for amount in bursts:
            self.assertGreaterEqual(amount, .05)
            self.assertLessEqual(amount, .14)

    def test_stop_closes_noise(self):
        self.start_locked()
        self.sched.advance(.5)
        self.tt.stop_eccentric()
        self.assertEqual(self.noise.amps[-1], (0, settings.NOISE_STOP_RELEASE))
        self.assertEqual(self.distortion.amounts[-1],
                         settings.DISTORTION_DEFAULT)
        self.assertEqual(self.sched.pending(), 0)
