import collections
import unittest
from unittest import mock

from . import scheduler
from . import speech_test
from . import tts


Voice = collections.namedtuple('Voice', ('id', 'name', 'languages'))


class FakeEngine:
    """Records calls and lets tests fire the pyttsx3 callbacks."""

    def __init__(self, voices=()):
        self.props = dict(rate=200, volume=1., voices=list(voices))
        self.callbacks = {}
        self.said = []
        self.stops = 0
        self.iterations = 0
        self.looping = None

    def getProperty(self, name):
        return self.props[name]

    def setProperty(self, name, value):
        self.props[name] = value

    def connect(self, topic, callback):
        self.callbacks[topic] = callback

    def fire(self, topic, **kw):
        self.callbacks[topic](**kw)

    def say(self, text, name):
        self.said.append((name, text))

    def stop(self):
        self.stops += 1

    def startLoop(self, use_driver_loop):
        self.looping = use_driver_loop

    def iterate(self):
        self.iterations += 1

    def endLoop(self):
        self.looping = None


class TestFindVoice(unittest.TestCase):

    voices = [
        Voice('de.anna', 'Anna', ['de_DE']),
        Voice('en.fred', 'Fred', ['en_US']),
        Voice('en.samantha', 'Samantha', [b'\x05en_US']),
        Voice('en-US-google', 'Google US English', []),
    ]

    def test_preferred_voice_for_lang(self):
        self.assertEqual(tts.find_voice(self.voices, 'en_US'), 'en.samantha')

    def test_lang_in_id(self):
        self.assertEqual(
            tts.find_voice(self.voices, 'en_US', preferred=('Google',)),
            'en-US-google')

    def test_nothing_preferred(self):
        self.assertIsNone(tts.find_voice(self.voices, 'de_DE'))


class TestPyttsx3Speech(unittest.TestCase):

    text = 'one two three four'

    def setUp(self):
        self.sched = scheduler.ManualScheduler()
        self.fake = FakeEngine(TestFindVoice.voices)
        with mock.patch.object(tts.pyttsx3, 'init', return_value=self.fake):
            self.engine = tts.Pyttsx3Speech(self.sched, pump_secs=.25)
        self.rec = speech_test.Recorder(self.engine)

    def test_properties(self):
        self.assertEqual(self.fake.props['rate'], 180)
        self.assertEqual(self.fake.props['voice'], 'en.samantha')

    def test_pump(self):
        self.engine.start()
        self.assertIs(self.fake.looping, False)
        self.sched.advance(.6)
        self.assertEqual(self.fake.iterations, 2)
        self.engine.close()
        self.assertIsNone(self.fake.looping)
        self.sched.advance(1.)
        self.assertEqual(self.fake.iterations, 2)

    def test_reads_to_the_end(self):
        self.engine.speak(self.text)
        self.assertEqual(self.fake.said, [('utterance0', self.text)])
        self.fake.fire('started-utterance', name='utterance0')
        for location in (0, 4, 8, 14):
            self.fake.fire('started-word', name='utterance0',
                           location=location, length=3)
        self.fake.fire('finished-utterance', name='utterance0', completed=True)
        self.assertEqual(self.rec.events, ['start', 0, 4, 8, 14, 'end'])
        self.assertFalse(self.engine.speaking)

    def test_pause_resume_rebases_offsets(self):
        self.engine.speak(self.text)
        self.fake.fire('started-utterance', name='utterance0')
        self.fake.fire('started-word', name='utterance0', location=4, length=3)
        stops = self.fake.stops
        self.engine.pause()
        self.assertTrue(self.engine.paused)
        self.assertEqual(self.fake.stops, stops + 1)
        self.fake.fire('finished-utterance', name='utterance0',
                       completed=False)
        self.engine.resume()
        self.assertFalse(self.engine.paused)
        self.assertEqual(self.fake.said[-1], ('utterance1', 'two three four'))
        self.fake.fire('started-utterance', name='utterance1')
        self.fake.fire('started-word', name='utterance0', location=8, length=5)
        for location in (0, 4, 10):
            self.fake.fire('started-word', name='utterance1',
                           location=location, length=3)
        self.fake.fire('finished-utterance', name='utterance1', completed=True)
        self.assertEqual(self.rec.events, ['start', 4, 4, 8, 14, 'end'])

    def test_pause_twice_resumes_from_last_word(self):
        self.engine.speak(self.text)
        self.fake.fire('started-word', name='utterance0', location=4, length=3)
        self.engine.pause()
        self.engine.resume()
        self.fake.fire('started-word', name='utterance1', location=4, length=5)
        self.engine.pause()
        self.engine.resume()
        self.assertEqual(self.fake.said[-1], ('utterance2', 'three four'))
        self.fake.fire('started-word', name='utterance2', location=6, length=4)
        self.assertEqual(self.rec.events, [4, 8, 14])

    def test_cancel_is_silent(self):
        self.engine.speak(self.text)
        self.engine.cancel()
        self.fake.fire('finished-utterance', name='utterance0',
                       completed=False)
        self.assertEqual(self.rec.events, [])
        self.assertFalse(self.engine.speaking)

    def test_idle_pause_resume(self):
        self.engine.pause()
        self.engine.resume()
        self.assertFalse(self.engine.paused)
        self.assertEqual(self.fake.said, [])


if __name__ == '__main__':
    unittest.main()
