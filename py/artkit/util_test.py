import unittest

import numpy as np

from . import util


class TestUtil(unittest.TestCase):

    def test_remap(self):
        self.assertAlmostEqual(util.remap(600, 10, 600, 0.1, 1.), 1.)
        self.assertAlmostEqual(util.remap(10, 10, 600, 0.1, 1.), 0.1)
        # not clamped
        self.assertAlmostEqual(util.remap(1100, 600, 1023, 1., 2.),
                               1 + 500 / 423)

    def test_round_half_up(self):
        self.assertEqual(util.round_half_up(2.5), 3)
        self.assertEqual(util.round_half_up(1428.4), 1428)
        self.assertEqual(util.round_half_up(0.5), 1)

    def test_smoothstep(self):
        self.assertEqual(util.smoothstep(.35, .55, 0.), 0.)
        self.assertEqual(util.smoothstep(.35, .55, 1.), 1.)
        self.assertAlmostEqual(util.smoothstep(.35, .55, .45), .5)

    def test_serialize(self):
        d = dict(a=np.float32(0.5), b=np.arange(3), c=(np.int64(1), True),
                 d=np.bool_(False))
        self.assertEqual(util.deserialize(util.serialize(d)),
                         dict(a=0.5, b=[0, 1, 2], c=[1, True], d=False))

    def test_print_exc(self):
        def fail():
            raise ValueError('x')
        self.assertIsNone(util.print_exc(fail, util.NoLogger())())
        self.assertEqual(util.print_exc(lambda: 3, util.NoLogger())(), 3)
