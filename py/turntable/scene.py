"""Per frame scene for the turntable page (painted by static/turntable)."""

import math

import numpy as np

from . import settings


class Particles:
    """Ring of particles around the album, exploding outwards on hops."""

    def __init__(self, n, center, rng):
        self.center = np.array(center, dtype=float)
        self.rng = rng
        self.pos = np.zeros((n, 2))
        self.vel = np.zeros((n, 2))
        self.size = np.zeros(n)
        self.alpha = np.zeros(n)
        self.reset(np.ones(n, dtype=bool))

    def reset(self, mask):
        n = int(mask.sum())
        angle = self.rng.uniform(0, 2 * math.pi, n)
        dist = self.rng.uniform(*settings.PARTICLE_DIST, n)
        self.pos[mask] = self.center + np.stack(
            [np.cos(angle), np.sin(angle)], axis=1) * dist[:, None]
        self.vel[mask] = 0
        self.size[mask] = self.rng.uniform(*settings.PARTICLE_SIZE, n)
        self.alpha[mask] = 0

    def explode(self):
        d = self.pos - self.center
        angle = np.arctan2(d[:, 1], d[:, 0])
        force = self.rng.uniform(*settings.PARTICLE_FORCE, len(angle))
        self.vel = np.stack(
            [np.cos(angle), np.sin(angle)], axis=1) * force[:, None]
        self.alpha[:] = 255

    def update(self):
        self.pos += self.vel
        self.vel *= settings.PARTICLE_DAMPING
        self.alpha *= settings.PARTICLE_FADE
        faded = self.alpha < settings.PARTICLE_MIN_ALPHA
        if faded.any():
            self.reset(faded)

    def visible(self):
        """[[x, y, radius, alpha], ...] for particles worth drawing."""
        mask = self.alpha > settings.PARTICLE_MIN_ALPHA
        return np.concatenate([
            self.pos[mask], self.size[mask, None], self.alpha[mask, None]
        ], axis=1).round(2)


class TurntableScene:
    """Callable returning one scene dict per frame.

    Register `on_hop` as the controller's hop listener.
    """

    def __init__(self, turntable, width=settings.WIDTH,
                 height=settings.HEIGHT, seed=None):
        self.turntable = turntable
        self.width = width
        self.height = height
        self.rng = np.random.default_rng(seed)
        self.particles = Particles(
            settings.PARTICLES, (width / 2, height / 2), self.rng)
        self.frame = 0
        self.eccentric_timer = 0

    def on_hop(self, index, hop_ms):
        # decoration only, counts down in frames
        self.eccentric_timer = int(hop_ms * settings.FPS // 1000)
        self.particles.explode()

    def status(self, info):
        tt = self.turntable
        if tt.snapshot.pot <= settings.POT_IDLE:
            return dict(text='STOPPED : knob <= {}'.format(settings.POT_IDLE),
                        color=(150, 150, 150))
        if tt.locked:
            return dict(text='CONTINUOUS ECCENTRIC : Now: ' + info.title,
                        color=(255, 100, 120))
        return dict(text='CENTRIC : Playing at {:.1f}x'.format(tt.rate),
                    color=(100, 255, 150))

    def locked_effects(self):
        w, h = self.width, self.height
        u = self.rng.uniform
        half = settings.ALBUM_SIZE / 2
        effects = dict(
            scanlines=[
                [u(0, w), u(0, h), u(0, w), u(3, 18),
                 u(0, 255), u(0, 255), u(0, 255)]
                for _ in range(settings.SCANLINES)],
            pulse=settings.PULSE_RADIUS + settings.PULSE_AMPLITUDE * math.sin(
                self.frame * settings.PULSE_SPEED),
            jitter=[u(-settings.ALBUM_JITTER, settings.ALBUM_JITTER)
                    for _ in range(2)],
            rotation=u(-settings.ALBUM_ROTATION, settings.ALBUM_ROTATION),
            poem=settings.POEM[
                int(self.frame / settings.POEM_FRAMES) % len(settings.POEM)],
            glitch_bars=[],
        )
        if self.frame % 2 == 0:
            effects['glitch_bars'] = [
                [u(-half, half), u(2, 10), u(200, 255), u(110, 200)]
                for _ in range(settings.GLITCH_BARS)]
        return effects

    def __call__(self):
        self.frame += 1
        tt = self.turntable
        index = tt.display_index()
        info = settings.TRACKS[index]
        light = tt.light
        scene = dict(
            frame=self.frame,
            size=[self.width, self.height],
            track=dict(index=index, title=info.title, artist=info.artist,
                       color=info.color, bg_color=info.bg_color),
            album_size=settings.ALBUM_SIZE,
            locked=tt.locked,
            mode='ECCENTRIC (continuous)' if tt.locked else 'CENTRIC',
            status=self.status(info),
            speed=round(tt.rate, 3),
            pot=tt.snapshot.pot,
            light=dict(raw=tt.snapshot.light, average=round(light.average, 1),
                       baseline=round(light.baseline, 1),
                       delta=round(light.delta, 1)),
            warning=None if light.calibrated else (
                'Calibrate light sensor before test'),
            eccentric_timer=self.eccentric_timer,
        )
        if tt.locked:
            scene.update(self.locked_effects())
        self.particles.update()
        scene['particles'] = self.particles.visible()
        if self.eccentric_timer > 0:
            self.eccentric_timer -= 1
        return scene
