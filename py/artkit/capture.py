"""Records raw serial chunks and replays them with their original timing.

Usage (via the sketch entry points):

python -m turntable --record=session.ndjson
python -m turntable --replay=session.ndjson [--noloop]
"""

import asyncio
import os
import time

from . import util


TIMESTAMP_KEY = '__t'


class CaptureWriter:
    """Appends `{"__t": <secs>, "chunk": <text>}` lines to `path`."""

    def __init__(self, path, overwrite=False, clock=time.time):
        assert overwrite or not os.path.exists(path), (
            f'{path} exists (use overwrite)')
        self.path = path
        self.clock = clock
        self.file = open(path, 'w')

    def __call__(self, chunk):
        line = util.serialize({TIMESTAMP_KEY: self.clock(), 'chunk': chunk})
        self.file.write(line.decode('utf8') + '\n')

    def close(self):
        self.file.close()


def read_capture(path):
    """Yields (dt, chunk) with dt relative to the previous chunk."""
    lt = None
    with open(path) as f:
        for line in f:
            if not line.strip():
                continue
            d = util.deserialize(line)
            t = d[TIMESTAMP_KEY]
            dt = 0. if lt is None else max(0., t - lt)
            lt = t
            yield dt, d['chunk']


async def replay(path, feed, loop_forever=True, logger=None, speed=1.):
    """Feeds chunks from `path` into `feed()`, sleeping between them."""
    logger = logger or util.NoLogger()
    feed = util.print_exc(feed, logger)
    while True:
        logger.info('Replaying %s', path)
        for dt, chunk in read_capture(path):
            await asyncio.sleep(dt / speed)
            feed(chunk)
        if not loop_forever:
            break
    logger.info('Replay of %s done', path)
