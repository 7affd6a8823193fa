"""Hand/lift state machine driving the reading.

Two photocells and an FSR steer a speech engine reading a fixed text:

- A hand over the photocells pauses the reading; while paused, moving the
  hand left/right moves the current word along its line.
- Pressing the FSR also pauses, and latches the current word. Lifting the
  hand while pressing lifts that word out of the text.
- The FSR takes precedence: while pressed, the hand neither pauses/resumes
  nor steers, and speech boundary events do not move the current word.
"""

from artkit import signals as S
from artkit import util

from . import settings
from . import state


class TangibleWords:

    def __init__(self, speech, text=settings.TEXT, hand_mode=settings.HAND_MODE,
                 logger=None):
        if hand_mode not in ('all', 'any'):
            raise ValueError('hand_mode must be "all" or "any"')
        self.speech = speech
        self.hand_mode = hand_mode
        self.logger = logger or util.NoLogger()
        speech.on_start = self.on_speech_start
        speech.on_end = self.on_speech_end
        speech.on_boundary = self.on_speech_boundary

        self.reading = state.ReadingSession(text)
        self.snapshot = state.SensorSnapshot(0, 0, 0)
        self.baseline = state.HandBaseline()
        self.lift = None
        self.hand_detected = False
        self.hand_ratio = .5
        self.ratio_smooth = S.Exponential(
            alpha=settings.HAND_RATIO_ALPHA, initial=.5)
        self.fsr_signal = S.From(settings.FSR_MIN, settings.FSR_MAX) | S.Clip()
        self.fsr_level = S.AsymExponential(
            up=settings.FSR_UP, down=settings.FSR_DOWN)

    @property
    def pressed(self):
        return self.lift is not None

    @property
    def lifting(self):
        return self.lift is not None and self.lift.lifting

    def hand_present(self):
        covered = [p < settings.HAND_THRESHOLD
                   for p in (self.snapshot.photo1, self.snapshot.photo2)]
        return all(covered) if self.hand_mode == 'all' else any(covered)

    # sensor input
    ###########################################################################

    def on_frame(self, frame):
        self.snapshot = self.snapshot.merge(frame)
        s = self.snapshot
        if self.baseline.update(s.photo1, s.photo2):
            self.logger.info('Photocell baselines %d / %d', s.photo1, s.photo2)

        if s.fsr > settings.FSR_MIN:
            if self.lift is None:
                self.press()
            self.lift.update(s.photo_avg)
        elif self.lift is not None:
            self.release()

        if self.lift is None:
            if self.hand_present():
                if not self.hand_detected and self.reading.speaking:
                    self.speech.pause()
                    self.hand_detected = True
            elif self.hand_detected and self.reading.speaking:
                self.speech.resume()
                self.hand_detected = False

    def press(self):
        self.lift = state.LiftState(self.snapshot.photo_avg, self.reading.index)
        if self.reading.speaking:
            self.speech.pause()
        self.logger.debug('FSR pressed on word %s', self.lift.lifted_index)

    def release(self):
        self.lift = None
        # re-evaluated from the same frame
        self.hand_detected = False
        if self.reading.speaking and self.speech.paused:
            self.speech.resume()
        self.logger.debug('FSR released')

    # speech events
    ###########################################################################

    def on_speech_start(self):
        self.reading.speaking = True
        self.reading.set_index(0)

    def on_speech_end(self):
        self.reading.speaking = False
        self.reading.set_index(-1)
        self.hand_detected = False

    def on_speech_boundary(self, char_index):
        if self.pressed:
            return
        self.reading.set_index(self.reading.index_for_char(char_index))

    # user triggers
    ###########################################################################

    def start_reading(self):
        if self.reading.speaking:
            return
        self.speech.cancel()
        self.speech.speak(self.reading.text)

    def stop_reading(self):
        if not self.reading.speaking:
            return
        self.speech.cancel()
        self.reading.speaking = False
        self.reading.set_index(-1)
        self.hand_detected = False

    # per rendered frame
    ###########################################################################

    def smooth(self):
        """Moves FSR level and lift amount one frame towards their targets."""
        self.fsr_level(value=self.fsr_signal(value=self.snapshot.fsr))
        if self.lift is not None:
            self.lift.step()

    def steer(self, layout):
        """Moves the current word with the hand while paused by it."""
        if self.pressed or not self.hand_detected or self.reading.index < 0:
            return False
        if self.reading.index >= len(layout):
            return False
        self.hand_ratio = self.baseline.ratio(
            self.snapshot.photo1, self.snapshot.photo2)
        ratio = self.ratio_smooth(value=self.hand_ratio)
        index = layout.word_near(self.reading.index, ratio)
        self.reading.set_index(index)
        return True
