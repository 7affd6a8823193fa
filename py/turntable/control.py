"""Eccentric playback state machine.

The transport follows the pot (idle at <= 30, rate from a piecewise linear
map). Once the light average leaves its baseline while playing, the
controller locks into eccentric mode: a chain of "hops" visits the four
tracks in round robin order, each for a duration that shrinks with the
playback rate, while a scratch loop perturbs whatever is audible.

Hops are chained through the scheduler; at most one hop callback is ever
pending (`hop_handle`), and every way out of eccentric mode cancels it.
"""

import itertools
import random

from artkit import logic as L
from artkit import signals as S
from artkit import util

from . import settings
from . import state


def hop_duration_ms(rate):
    """Hop length in ms, inversely proportional to `rate`."""
    rate = util.clamp(rate, *settings.HOP_RATE_RANGE)
    ms = util.round_half_up(settings.HOP_BASE_MS / rate)
    return util.clamp(ms, *settings.HOP_MS_RANGE)


class Turntable:
    """Owns transport, light calibration and the eccentric session.

    `tracks` are track capabilities (see `artkit.mixer.Track`), `noise` and
    `distortion` are optional. `on_hop(index, hop_ms)` is called at the
    start of every hop.
    """

    def __init__(self, tracks, noise=None, distortion=None, scheduler=None,
                 rng=None, logger=None, main=settings.MAIN_TRACK,
                 on_hop=None):
        assert len(tracks) == len(settings.TRACKS), tracks
        self.tracks = list(tracks)
        self.noise = noise
        self.distortion = distortion
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.logger = logger or util.NoLogger()
        self.main = main
        self.on_hop = on_hop or (lambda index, hop_ms: None)

        self.rate_signal = S.PiecewiseLinear(settings.RATE_POINTS)
        self.snapshot = state.SensorSnapshot(0, 0, 0)
        self.light = state.LightCalibration()
        self.rate = 1.
        self.playing = False
        self.current = main
        self.session = None
        self.hop_handle = None
        self.scratch_handle = None
        self.effects = {}
        self.effect_ids = itertools.count()

    @property
    def main_track(self):
        return self.tracks[self.main]

    @property
    def locked(self):
        return self.session is not None

    def display_index(self):
        if self.locked and self.session.current_target is not None:
            return self.session.current_target
        return self.current

    # sensor input
    ###########################################################################

    def on_frame(self, frame):
        self.snapshot = state.SensorSnapshot.from_frame(frame)
        pot = self.snapshot.pot
        self.rate = self.rate_signal(value=pot)

        if pot <= settings.POT_IDLE:
            if self.playing:
                self.playing = False
                self.main_track.pause()
            if self.locked:
                self.stop_eccentric()
        elif not self.playing:
            self.playing = True
            self.main_track.loop()

        if self.light.update(self.snapshot.light):
            self.logger.info('Auto-calibrated @ %.1f', self.light.baseline)

        if self.playing and not self.locked and self.light.exceeded:
            self.logger.info('Light delta %.1f : locking eccentric',
                             self.light.delta)
            self.lock()

        if self.main_track.is_playing():
            self.main_track.rate(self.rate)

    # user triggers
    ###########################################################################

    def toggle_music(self):
        self.playing = not self.playing
        if self.playing:
            self.main_track.loop()
        else:
            self.main_track.pause()
        if not self.playing and self.locked:
            self.stop_eccentric()

    def calibrate(self):
        baseline = self.light.calibrate()
        self.logger.info('Light calibrated @ %.1f', baseline)

    def lock(self):
        """Enters eccentric mode, returns False if it cannot (or did)."""
        if self.locked:
            return False
        if not self.playing or self.snapshot.pot <= settings.POT_IDLE:
            self.logger.info('Not locking eccentric : transport stopped')
            return False
        self.session = state.EccentricSession(len(self.tracks))
        self.start_scratch()
        self._hop()
        return True

    def stop_eccentric(self):
        if self.hop_handle:
            self.hop_handle.cancel()
            self.hop_handle = None
        self.stop_scratch()
        session = self.session
        if session and session.current_target is not None:
            if session.is_self_mix:
                if self.main_track.loaded:
                    self._resume_main(*session.main_mark)
            else:
                self.tracks[session.current_target].stop()
                if self.playing:
                    self.main_track.loop()
                    self.main_track.rate(self.rate)
        self.session = None
        self.current = self.main
        if session is not None:
            self.logger.info('Eccentric stopped after %d hops.', session.hops)

    # hop chain
    ###########################################################################

    def _arm(self, delay, callback, *args):
        assert self.hop_handle is None, 'hop already pending'
        self.hop_handle = self.scheduler.call_later(
            delay, self._fire, callback, args)

    def _fire(self, callback, args):
        self.hop_handle = None
        callback(*args)

    def _hop(self):
        if (not self.locked or not self.playing
                or self.snapshot.pot <= settings.POT_IDLE):
            self.stop_eccentric()
            return
        session = self.session
        hop_ms = hop_duration_ms(self.rate)
        hop = hop_ms / 1000
        rate = util.clamp(self.rate or 1., *settings.HOP_RATE_RANGE)

        target = session.advance()
        self.current = session.current_target = target
        session.is_self_mix = target == self.main
        session.hop_ms = hop_ms
        self.on_hop(target, hop_ms)

        main = self.main_track
        track = self.tracks[target]
        t0 = main.current_time()
        started = self.scheduler.time()
        session.main_mark = (t0, started)
        if session.is_self_mix and main.loaded:
            main.rate(rate * L.rnd(settings.SELF_MIX_JITTER, self.rng))
            main.jump(session.resume_offset(target, main.duration()))
            self._arm(hop, self._finish_self_mix, t0, started, hop)
        elif main.loaded and track.loaded:
            main.pause()
            track.play()
            track.rate(rate * L.rnd(settings.CROSS_JITTER, self.rng))
            track.jump(session.resume_offset(target, track.duration()))
            self._arm(hop, self._finish_cross, target, t0, started, hop)
        else:
            self.logger.debug('Silent hop to %d', target)
            self._arm(hop, self._finish_silent)

    def _resume_main(self, t0, started):
        main = self.main_track
        elapsed = self.scheduler.time() - started
        main.jump(state.wrap_offset(t0 + elapsed, main.duration(), 0.))
        main.rate(self.rate)

    def _finish_self_mix(self, t0, started, hop):
        self.session.offsets[self.main] += hop
        self._resume_main(t0, started)
        self.session.current_target = None
        self.session.is_self_mix = False
        self._arm(0, self._hop)

    def _finish_cross(self, target, t0, started, hop):
        self.session.offsets[target] += hop
        self.tracks[target].stop()
        self.main_track.loop()
        self._resume_main(t0, started)
        self.session.current_target = None
        self._arm(0, self._hop)

    def _finish_silent(self):
        self.session.current_target = None
        self._arm(0, self._hop)

    # scratch loop
    ###########################################################################

    def _later(self, delay, callback, *args):
        key = next(self.effect_ids)

        def fire():
            del self.effects[key]
            callback(*args)
        self.effects[key] = self.scheduler.call_later(delay, fire)

    def start_scratch(self):
        if self.scratch_handle:
            return
        if self.noise:
            self.noise.start()
            self.noise.amp(0.)
        self.scratch_handle = self.scheduler.call_every(
            settings.SCRATCH_SECS, self._scratch)

    def stop_scratch(self):
        if self.scratch_handle:
            self.scratch_handle.cancel()
            self.scratch_handle = None
        for handle in self.effects.values():
            handle.cancel()
        self.effects.clear()
        if self.distortion:
            self.distortion.set(settings.DISTORTION_DEFAULT)
        if self.noise:
            self.noise.amp(0, settings.NOISE_STOP_RELEASE)

    def audible_track(self):
        target = self.session.current_target if self.session else None
        if target is not None and self.tracks[target].loaded:
            return self.tracks[target]
        return self.main_track

    def _scratch(self):
        if not self.locked:
            return
        track = self.audible_track()
        if not track.loaded:
            return
        base = util.clamp(self.rate or 1., *settings.SCRATCH_RATE_RANGE)
        track.rate(base * L.rnd(settings.SCRATCH_RATE_JITTER, self.rng))
        jitter = self.rng.choice(settings.SCRATCH_JUMPS)
        track.jump(max(settings.SCRATCH_MIN_POS, track.current_time() + jitter))

        if self.noise:
            self.noise.amp(L.rnd(settings.NOISE_AMP, self.rng),
                           settings.NOISE_ATTACK)
            self._later(settings.NOISE_CLOSE_DELAY, self.noise.amp, 0,
                        settings.NOISE_RELEASE)
        if self.distortion and self.rng.random() < settings.DISTORTION_CHANCE:
            self.distortion.set(L.rnd(settings.DISTORTION_RANGE, self.rng))
            self._later(settings.DISTORTION_RESTORE_DELAY, self.distortion.set,
                        settings.DISTORTION_DEFAULT)
