"""Building blocs for signals.

Synopsis:

  from artkit import logic as L

  class Mult(L.Signal):
    def init(self, mult):
        pass
    def call(self, value):
        return value * self.mult

  sig = Mult(mult=3) | Mult(mult=2)
  print(sig(value=1))  # 6
"""

import inspect
import random

# utils
###############################################################################


def rnd(minmax, rng=random):
    return minmax[0] + rng.random() * (
        minmax[1] - minmax[0])


class MissingInputsException(Exception):
    """Thrown if signal inputs cannot be satisfied."""
    pass


# Base classes
###############################################################################


def is_signal(x):
    return hasattr(x, 'call') or isinstance(x, SignalChain)


class Signal:
    """Provides |, wants, params.

    A Signal subclass provides
    - `init(self, param1, param2=0, ...)` that can provide additional
      initialization logic
    - `call(self, signal1, signal2, ...)` that returns the new value.

    Every signal is called with `**signals` as arguments; `value` is the
    conventional name of the chained input (see `SignalChain`).

    Every parameter can be a `Signal` itself in which case it will be computed
    before the function `call()` is executed and the result will be made
    available as an attribute like a non-`Signal` parameter.

    Note the following special attributes
    - `wants` : signals needed for computation
    - `callkws` : part of `wants` that is needed as params for `call()`
    - `params` : names of parameters (for `repr()` display)
    - `signalparams` : dictionary of signals from which to compute params
    """

    def __init__(self, *args, **params):
        self.callkws = set(inspect.getfullargspec(self.call).args[1:])
        self.wants = set(self.callkws)
        if hasattr(self, 'init'):
            names = inspect.getfullargspec(self.init).args[1:]
            defaults = inspect.getfullargspec(self.init).defaults
            defaults = defaults if defaults else []
            d = dict(zip(names[::-1], defaults[::-1]))
            d.update(**params)
            params = d
            if args:
                params.update(zip(names, args))
            self.init(**params)
        self.params = params.keys()
        self.signalparams = {}
        for k, v in params.items():
            assert not hasattr(self, k), 'hasattr({}, {})'.format(
                self.__class__.__name__, k)
            setattr(self, k, v)
            if is_signal(v):
                self.signalparams[k] = v
                self.wants = self.wants.union(v.wants)

    def __or__(self, other):
        return SignalChain(self, other)

    def __call__(self, **allkw):
        for k, v in self.signalparams.items():
            setattr(self, k, v(**allkw))
        missing = set(self.wants).difference(allkw.keys())
        if missing:
            raise MissingInputsException(
                f'Signal {self!r} is missing inputs {missing}')
        kw = {k: allkw[k] for k in self.callkws}
        return self.call(**kw)

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ','.join([
                '{}={}'.format(p, self.signalparams.get(p, getattr(self, p)))
                for p in self.params
            ]))


class SignalChain(Signal):

    def __init__(self, sig1, sig2):
        self.wants = sig1.wants.union(sig2.wants.difference(('value',)))
        self.sig1 = sig1
        self.sig2 = sig2

    def __call__(self, **kw):
        return self.sig2(value=self.sig1(**kw), **{
            k: v for k, v in kw.items() if k != 'value'})

    def __repr__(self):
        return ' | '.join([repr(self.sig1), repr(self.sig2)])
