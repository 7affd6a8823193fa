import unittest

from . import scheduler
from . import speech


class Recorder:

    def __init__(self, engine):
        self.events = []
        engine.on_start = lambda: self.events.append('start')
        engine.on_end = lambda: self.events.append('end')
        engine.on_boundary = lambda i: self.events.append(i)


class TestWordOffsets(unittest.TestCase):

    def test_offsets(self):
        self.assertEqual(speech.word_offsets('to be or'), [0, 3, 6])
        text = 'What is Experience Prototyping?'
        for i, offset in enumerate(speech.word_offsets(text)):
            self.assertEqual(len(text[:offset].split(' ')) - 1, i)


class TestSilentSpeech(unittest.TestCase):

    def setUp(self):
        self.sched = scheduler.ManualScheduler()
        self.engine = speech.SilentSpeech(self.sched, secs_per_word=1.)
        self.rec = Recorder(self.engine)

    def test_reads_to_the_end(self):
        self.engine.speak('to be or')
        self.sched.advance(0.5)
        self.assertEqual(self.rec.events, ['start', 0])
        self.sched.advance(5)
        self.assertEqual(self.rec.events, ['start', 0, 3, 6, 'end'])
        self.assertFalse(self.engine.speaking)

    def test_pause_resume(self):
        self.engine.speak('to be or')
        self.sched.advance(0.5)
        self.engine.pause()
        self.assertTrue(self.engine.paused)
        self.sched.advance(10)
        self.assertEqual(self.rec.events, ['start', 0])
        self.engine.resume()
        self.assertFalse(self.engine.paused)
        self.sched.advance(1)
        self.assertEqual(self.rec.events, ['start', 0, 3])

    def test_cancel_is_silent(self):
        self.engine.speak('to be or')
        self.sched.advance(1.5)
        self.engine.cancel()
        self.sched.advance(10)
        self.assertEqual(self.rec.events, ['start', 0, 3])
        self.assertFalse(self.engine.speaking)
        self.assertEqual(self.sched.pending(), 0)

    def test_pause_when_idle_is_noop(self):
        self.engine.pause()
        self.assertFalse(self.engine.paused)
        self.engine.resume()
        self.assertEqual(self.sched.pending(), 0)
