"""Speech synthesis capability.

An engine reads one text at a time and reports progress through three
callbacks, all called on the event loop thread:

- `on_start()` when speaking begins,
- `on_boundary(char_index)` when a word starting at `char_index` is spoken,
- `on_end()` when the text was read to the end.

`cancel()` does not call `on_end()`; the caller owns its state at that point.
`pause()` and `resume()` are no-ops when there is nothing to pause/resume.
"""

from . import util


def word_offsets(text):
    """Character index of every word start, splitting on single spaces."""
    offsets = []
    i = 0
    for word in text.split(' '):
        offsets.append(i)
        i += len(word) + 1
    return offsets


def noop(*args):
    pass


class Speech:

    def __init__(self, logger=None):
        self.logger = logger or util.NoLogger()
        self.on_start = self.on_end = self.on_boundary = noop
        self.speaking = False
        self._paused = False

    @property
    def paused(self):
        return self._paused

    def speak(self, text):
        raise NotImplementedError()

    def pause(self):
        raise NotImplementedError()

    def resume(self):
        raise NotImplementedError()

    def cancel(self):
        raise NotImplementedError()

    def start(self):
        pass

    def close(self):
        pass


class SilentSpeech(Speech):
    """Pretends to read: emits a word boundary every `secs_per_word`.

    Useful without a TTS engine, and deterministic with a manual scheduler.
    """

    def __init__(self, scheduler, secs_per_word=0.35, logger=None):
        super().__init__(logger)
        self.scheduler = scheduler
        self.secs_per_word = secs_per_word
        self.handle = None
        self.offsets = []
        self.next = 0
        self.started = False

    def _arm(self, delay, callback):
        if self.handle:
            self.handle.cancel()
        self.handle = self.scheduler.call_later(delay, callback)

    def speak(self, text):
        self.cancel()
        self.offsets = word_offsets(text)
        self.next = 0
        self.started = False
        self.speaking = True
        self._arm(0, self._start)

    def _start(self):
        self.started = True
        self.on_start()
        self._tick()

    def _tick(self):
        self.handle = None
        if self.next >= len(self.offsets):
            self.speaking = False
            self.on_end()
            return
        offset = self.offsets[self.next]
        self.next += 1
        self.on_boundary(offset)
        self._arm(self.secs_per_word, self._tick)

    def pause(self):
        if not self.speaking or self._paused:
            return
        self._paused = True
        if self.handle:
            self.handle.cancel()
            self.handle = None

    def resume(self):
        if not self._paused:
            return
        self._paused = False
        if self.started:
            self._arm(self.secs_per_word, self._tick)
        else:
            self._arm(0, self._start)

    def cancel(self):
        if self.handle:
            self.handle.cancel()
            self.handle = None
        self.speaking = False
        self._paused = False
