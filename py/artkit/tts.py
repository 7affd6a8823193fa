"""pyttsx3 backed speech engine.

The engine runs in its external loop mode (`startLoop(False)`) and is pumped by
`iterate()` from the scheduler, so its callbacks arrive on the loop thread.

pyttsx3 has no pause: `pause()` stops the utterance and remembers the last
word boundary, `resume()` speaks the remaining text with boundary offsets
re-based onto the full text.

`python -m artkit.tts` lists the installed voices.
"""

import itertools

import pyttsx3  # type: ignore

from . import speech


PREFERRED_VOICES = ('Google', 'Natural', 'Premium', 'Enhanced', 'Samantha',
                    'Alex')


def find_voice(voices, lang='en_US', preferred=PREFERRED_VOICES):
    """Returns id of the first preferred voice speaking `lang`, or None."""
    def speaks(voice):
        langs = [str(l) for l in (voice.languages or [])]
        keys = (lang, lang.replace('_', '-'))
        return any(k in l for k in keys for l in langs) or any(
            k in voice.id for k in keys)
    for voice in voices:
        if speaks(voice) and any(p in voice.name for p in preferred):
            return voice.id


class Pyttsx3Speech(speech.Speech):

    def __init__(self, scheduler, rate=0.9, volume=1., lang='en_US',
                 pump_secs=0.02, logger=None):
        super().__init__(logger)
        self.engine = pyttsx3.init()
        wpm = self.engine.getProperty('rate')
        self.engine.setProperty('rate', int(wpm * rate))
        self.engine.setProperty('volume', volume)
        voice = find_voice(self.engine.getProperty('voices'), lang)
        if voice:
            self.logger.info('Using voice %s', voice)
            self.engine.setProperty('voice', voice)
        self.engine.connect('started-utterance', self._started)
        self.engine.connect('started-word', self._word)
        self.engine.connect('finished-utterance', self._finished)
        self.names = itertools.count()
        self.current = None
        self.text = ''
        self.base = 0
        self.last_offset = 0
        self.started = False
        self.scheduler = scheduler
        self.pump_secs = pump_secs
        self.pump = None

    def start(self):
        """Starts pumping the engine (needs the running event loop)."""
        if self.pump:
            return
        self.engine.startLoop(False)
        self.pump = self.scheduler.call_every(
            self.pump_secs, self.engine.iterate)

    def _say(self, offset):
        self.base = offset
        self.current = 'utterance{}'.format(next(self.names))
        self.engine.say(self.text[offset:], self.current)

    def speak(self, text):
        self.cancel()
        self.text = text
        self.last_offset = 0
        self.started = False
        self.speaking = True
        self._say(0)

    def _started(self, name):
        if name != self.current or self.started:
            return
        self.started = True
        self.on_start()

    def _word(self, name, location, length):
        if name != self.current or self._paused:
            return
        self.last_offset = self.base + location
        self.on_boundary(self.last_offset)

    def _finished(self, name, completed=True):
        if name != self.current or self._paused:
            return
        self.current = None
        self.speaking = False
        self.on_end()

    def pause(self):
        if not self.speaking or self._paused:
            return
        self._paused = True
        self.engine.stop()

    def resume(self):
        if not self._paused:
            return
        self._paused = False
        self._say(self.last_offset)

    def cancel(self):
        self.current = None
        self.speaking = False
        self._paused = False
        self.engine.stop()

    def close(self):
        self.cancel()
        if self.pump:
            self.pump.cancel()
            self.pump = None
            self.engine.endLoop()


if __name__ == '__main__':
    for voice in pyttsx3.init().getProperty('voices'):
        print('{} "{}" languages={}'.format(
            voice.id, voice.name, voice.languages))
