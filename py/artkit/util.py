import collections
import collections.abc
import json
import logging
import math
import os
import sys
import time
import traceback

import numpy as np  # type: ignore

from . import sigint


FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOGDIR = './logs'


# Will be set when `createLogger()` is called the first time.
logger: logging.Logger = logging.getLogger()


class Colorize:
    # https://stackoverflow.com/questions/4842424
    ANSI_RESET = '\033[0m'
    ANSI_MAP = {
        logging.INFO: '\033[1m',  # bold
        logging.WARNING: '\033[33m',  # yellow
        logging.ERROR: '\033[91m',  # bright red
        logging.FATAL: '\033[30;101m',  # black on bright red
    }

    def __init__(self, formatter):
        self.formatter = formatter

    def format(self, record):
        return ''.join([
            self.ANSI_MAP.get(record.levelno, self.ANSI_RESET),
            self.formatter.format(record),
            self.ANSI_RESET
        ])

    def __getattr__(self, name):
        return getattr(self.formatter, name)


def createLogger(name, stderr=True, logfile=True, colored=True, debug=True):  # noqa: N802, E501
    """Also updates module's `logger` to newly initialized logger."""
    global logger
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    formatter = logging.Formatter(FORMAT)
    if stderr:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(Colorize(formatter) if colored else formatter)
        handler.setLevel(logging.DEBUG)
        logger.addHandler(handler)
    if logfile:
        path = os.path.join(LOGDIR, name + '.log')
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handler = logging.FileHandler(path)
        handler.setFormatter(formatter)
        handler.setLevel(logging.DEBUG)
        logger.addHandler(handler)
    return logger


class NoLogger:
    def info(*args, **kw):
        pass

    def warn(*args, **kw):
        pass

    def warning(*args, **kw):
        pass

    def debug(*args, **kw):
        pass

    def error(*args, **kw):
        pass

    def exception(*args, **kw):
        pass


# scalar mapping (same semantics as the drawing environment the pages use)
###############################################################################

def remap(value, src_min, src_max, dst_min, dst_max):
    """Linearly maps `value` from src range to dst range (not clamped)."""
    return dst_min + (value - src_min) * (dst_max - dst_min) / (
        src_max - src_min)


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def lerp(a, b, amount):
    return a + (b - a) * amount


def smoothstep(edge0, edge1, x):
    t = clamp((x - edge0) / (edge1 - edge0), 0., 1.)
    return t * t * (3 - 2 * t)


def round_half_up(x):
    """Rounds .5 away from zero for positive values (unlike `round()`)."""
    return int(math.floor(x + 0.5))


# serialization
###############################################################################

def pythonize(d):
    """Transforms numpy arrays, float32, int64 to native Python dtypes."""
    if isinstance(d, dict):
        return {pythonize(k): pythonize(v) for k, v in d.items()}
    if isinstance(d, (np.ndarray, list, tuple)):
        return [pythonize(v) for v in d]
    if isinstance(d, np.floating):
        return float(d)
    if isinstance(d, np.integer):
        return int(d)
    if isinstance(d, np.bool_):
        return bool(d)
    if isinstance(d, collections.abc.KeysView):
        return list(d)
    return d


def serialize(data, indent=None):
    """Serializes `data` to UTF8 JSON."""
    return json.dumps(pythonize(data), indent=indent).encode('utf8')


def deserialize(msg):
    """Does the opposite of `serialize()`."""
    if isinstance(msg, bytes):
        msg = msg.decode('utf8')
    return json.loads(msg)


# stats
###############################################################################

class StreamingStats:
    """Helper class to periodically show stats."""

    def __init__(self, logger, hz=0.01, delay0=1.0):
        self.logger = logger
        self.t0 = time.time() - 1 / hz + delay0
        self.total = {}
        self.totaltotal = {}
        self.n = {}
        self.hz = hz
        self.info_getter = None

    def catch_ctrlc(self, shutdown_callback, info_getter=None):
        sigint.register_ctrlc_handler(self.dump)
        sigint.register_ctrlc2_handler(shutdown_callback)
        self.info_getter = info_getter

    def dump(self):
        """Dumps stats to logger.debug()."""
        dt = time.time() - self.t0
        for name in sorted(self.total):
            self.logger.debug(
                'stats[%s] : %.1f fps %.1f kps (sum %.1fM) -- %s',
                name, self.n[name] / dt, self.total[name] / dt / 1e3,
                self.totaltotal[name] / 1e6,
                self.info_getter() if self.info_getter else '')

    def dump_reset(self):
        self.dump()
        self.t0 = time.time()
        for name in self.n:
            self.n[name] = self.total[name] = 0

    def __call__(self, name, s=None):
        """"Adds `s` to stats and calls dump() every 1/hz seconds."""
        if name not in self.n:
            self.n[name] = self.total[name] = self.totaltotal[name] = 0
        self.n[name] += 1
        if s is not None:
            self.total[name] += len(s)
            self.totaltotal[name] += len(s)
        dt = time.time() - self.t0
        if dt * self.hz >= 1:
            self.dump_reset()
            return True
        return False


class KeyCounter:
    """Counts occurences of data keys in sliding window."""

    def __init__(self, secs=1):
        self.secs = secs
        self.counts = collections.defaultdict(int)
        self.events = collections.deque()

    def __call__(self, data):
        t = time.time()
        for key in data:
            self.counts[key] += 1
            self.events.append((t, key))
        while self.events and self.events[0][0] < t - self.secs:
            _, key = self.events.popleft()
            self.counts[key] -= 1


def print_exc(fun, logger):
    """Wraps `fun` to log exceptions (returning None) instead of raising."""
    def wrapped(*args, **kw):
        try:
            return fun(*args, **kw)
        except Exception as e:
            logger.error('uncaught exception in %s : %r',
                         getattr(fun, '__name__', fun), e)
            logger.warning(traceback.format_exc())
    return wrapped
