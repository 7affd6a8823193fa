"""Per frame scene for the tangible words page (painted by static/tangible)."""

import math

from artkit import util

from . import layout as layout_lib
from . import settings


def remap01(value, lo, hi):
    return util.clamp(util.remap(value, lo, hi, 0., 1.), 0., 1.)


def mix(color0, color1, amount):
    return [util.lerp(a, b, amount) for a, b in zip(color0, color1)]


class TangibleScene:
    """Callable returning one scene dict per frame.

    Also advances the controller's per frame smoothing and hand steering,
    since both depend on the layout computed here.
    """

    def __init__(self, controller, measure, width=settings.WIDTH,
                 height=settings.HEIGHT):
        self.controller = controller
        self.measure = measure
        self.width = width
        self.height = height
        self.frame = 0
        self.hand = None

    def word_style(self, i, word, box, current):
        c = self.controller
        level = c.fsr_level.value
        style = dict(text=word, x=box.x, y=box.y, size=settings.WORD_SIZE,
                     bold=False, color=list(settings.WORD_COLOR), dx=0, dy=0)
        if c.lifting and i == c.lift.lifted_index:
            style['hidden'] = True
            return style
        if i != current:
            return style
        style.update(size=settings.CURRENT_SIZE, bold=True,
                     color=list(settings.CURRENT_COLOR))
        f = self.frame
        if c.pressed and not c.lifting:
            amp = settings.PRESSED_SHAKE * level
            speed = .8 + level * .4
            dx = math.sin(f * speed) * amp
            dy = math.cos(f * speed * .9) * amp * .8
        elif not c.pressed:
            amp = settings.HOVER_SHAKE * level
            dx = math.sin(f * .45) * amp
            dy = math.cos(f * .38) * amp * .7
        else:
            return style
        style.update(
            size=settings.CURRENT_SIZE + settings.MAX_GROW * level,
            color=mix(settings.CURRENT_COLOR, settings.PRESSED_COLOR, level),
            dx=dx, dy=dy)
        return style

    def hand_shadow(self, layout):
        c = self.controller
        box = layout[c.reading.index]
        target = (box.x + box.width / 2, box.y + box.height / 2)
        if self.hand is None:
            self.hand = target
        else:
            self.hand = tuple(util.lerp(a, b, settings.HAND_FOLLOW)
                              for a, b in zip(self.hand, target))
        s = c.snapshot
        distance = remap01(min(s.photo1, s.photo2), *settings.SHADOW_RANGE)
        intensity = util.lerp(*settings.SHADOW_INTENSITY, distance)
        size = util.lerp(*settings.SHADOW_SIZE, distance)
        n = int(math.floor(util.lerp(*settings.SHADOW_LAYERS, distance)))
        hand_weight = util.smoothstep(*settings.SHADOW_MORPH, distance)
        core_alpha = util.clamp(util.remap(
            distance, 0, .5, *settings.SHADOW_CORE_ALPHA), 0., 1.)
        return dict(
            x=self.hand[0], y=self.hand[1],
            side='right',
            distance=distance,
            blur=util.lerp(*settings.SHADOW_BLUR, distance),
            hand_weight=hand_weight,
            blob_weight=1 - hand_weight,
            # [scale, alpha] from the outermost layer inwards
            layers=[[size * (1 + layer * distance * .2),
                     intensity * (.5 / n) / 255]
                    for layer in range(n, 0, -1)],
            core=dict(scale=size, alpha=core_alpha),
        )

    def lifted_word(self, layout):
        c = self.controller
        box = layout[c.lift.lifted_index]
        lift = c.lift.lift_amount
        shake = util.clamp(c.fsr_level.value, 0., 1.)
        amp = settings.LIFT_SHAKE * shake
        speed = .9 + shake * .4
        pd = remap01(c.snapshot.photo_avg, *settings.SHADOW_RANGE)
        n = int(math.floor(util.lerp(*settings.LIFT_SHADOW_LAYERS, pd)))
        max_offset = util.lerp(*settings.LIFT_SHADOW_OFFSET, pd)
        base_alpha = util.lerp(*settings.LIFT_SHADOW_ALPHA, pd)
        shadows = []
        for i in range(n, 0, -1):
            ratio = i / n
            offset = ratio * max_offset * lift
            shadows.append(dict(
                x=box.x + offset, y=box.y + offset,
                size=(settings.CURRENT_SIZE + lift * settings.LIFT_SHADOW_GROW
                      + i * 2 * (1 + pd)),
                alpha=base_alpha * ratio * lift * (1 - pd * .3),
                blur=(i - 1) * pd * 2 if pd > .5 and i > 1 else 0))
        return dict(
            text=c.reading.words[c.lift.lifted_index],
            dx=math.sin(self.frame * speed) * amp,
            dy=math.cos(self.frame * speed * .92) * amp * .85,
            shadows=shadows,
            x=box.x - lift * settings.LIFT_DRIFT,
            y=box.y - lift * settings.LIFT_RISE,
            size=settings.CURRENT_SIZE + lift * settings.LIFT_GROW,
            color=list(settings.PRESSED_COLOR),
        )

    def status(self):
        c = self.controller
        reading = c.reading
        s = c.snapshot
        status = dict(
            progress=None, counter=None, lifting=None,
            sensors='P1: {} | P2: {} | FSR: {}'.format(
                s.photo1, s.photo2, s.fsr))
        if not reading.speaking:
            status.update(state='READY', color=(120, 130, 140))
        elif c.pressed:
            status.update(state='FSR PRESSED', color=(255, 100, 50))
        elif c.hand_detected:
            status.update(state='PAUSED (Hand Detected)', color=(200, 120, 60))
        else:
            status.update(state='SPEAKING', color=(80, 160, 80))
        if reading.speaking:
            status['progress'] = reading.progress
        if reading.index >= 0:
            status['counter'] = 'Word {} of {}'.format(
                reading.index + 1, len(reading.words))
        if c.lifting:
            status['lifting'] = 'LIFTING: {} ({}%)'.format(
                reading.words[c.lift.lifted_index],
                int(math.floor(c.lift.lift_amount * 100)))
        return status

    def __call__(self):
        self.frame += 1
        c = self.controller
        c.smooth()
        current = c.reading.index
        layout = layout_lib.layout_words(
            c.reading.words, current, self.measure, self.width)
        words = [self.word_style(i, word, box, current)
                 for i, (word, box) in enumerate(zip(c.reading.words, layout))]
        scene = dict(
            frame=self.frame,
            size=[self.width, self.height],
            title=settings.TITLE,
            subtitle=settings.SUBTITLE,
            words=words,
            hand=None,
            lift=None,
        )
        if c.steer(layout):
            scene['hand'] = self.hand_shadow(layout)
        if c.lifting and c.lift.lifted_index < len(layout):
            scene['lift'] = self.lifted_word(layout)
        scene['status'] = self.status()
        return scene
