"""Incremental parsers for sensor frames arriving as text chunks.

Serial reads return arbitrary slices of the board's output, so parsers keep the
unconsumed tail between calls and return zero or more complete frames per
`feed()`.

- `JsonLineParser`: one JSON object per line, e.g. `{"pot": 512, "light": 80}`
- `BracketParser`: `<KEY:VALUE,KEY:VALUE>` frames anywhere in the stream
"""

import json
import math

from . import util


def is_finite_number(value):
    """True for ints/floats (not bools) representable as finite floats."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


class JsonLineParser:
    """Newline delimited JSON objects.

    Lines that are not wrapped in braces (e.g. debug prints from the board) are
    skipped silently, malformed objects are dropped with a warning. `required`
    values must be finite numbers. An unterminated line growing over
    `max_buffer` characters is discarded.
    """

    def __init__(self, required=(), defaults=None, max_buffer=1000,
                 logger=None):
        self.required = tuple(required)
        self.defaults = dict(defaults or {})
        self.max_buffer = max_buffer
        self.logger = logger or util.NoLogger()
        self.buffer = ''
        self.dropped = 0
        self.resets = 0

    def feed(self, text):
        self.buffer += text
        lines = self.buffer.split('\n')
        self.buffer = lines[-1]
        frames = []
        for line in lines[:-1]:
            frame = self.parse_line(line.strip())
            if frame is not None:
                frames.append(frame)
        if len(self.buffer) > self.max_buffer:
            self.logger.warning(
                'Discarding unterminated line (%d chars)', len(self.buffer))
            self.buffer = ''
            self.resets += 1
        return frames

    def parse_line(self, line):
        if not (line.startswith('{') and line.endswith('}')):
            return None
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            return self.drop('Dropping malformed line %r : %s', line, e)
        if not isinstance(record, dict):
            return self.drop('Dropping non-object line %r', line)
        frame = dict(self.defaults)
        for key, value in record.items():
            frame[key] = value
        for key in self.required:
            value = frame.get(key)
            if not is_finite_number(value):
                return self.drop('Dropping line %r : no numeric %s', line, key)
        return frame

    def drop(self, msg, *args):
        self.dropped += 1
        self.logger.warning(msg, *args)
        return None


class BracketParser:
    """`<...>` delimited frames of comma separated `KEY:VALUE` tokens.

    Only `keys` are reported and values must be integers; other tokens are
    ignored. A buffer growing over `max_buffer` characters without a complete
    frame is reset to empty.
    """

    def __init__(self, keys, max_buffer=200, logger=None):
        self.keys = set(keys)
        self.max_buffer = max_buffer
        self.logger = logger or util.NoLogger()
        self.buffer = ''
        self.resets = 0

    def feed(self, text):
        self.buffer += text
        frames = []
        while True:
            start = self.buffer.find('<')
            if start == -1:
                break
            end = self.buffer.find('>', start + 1)
            if end == -1:
                break
            frames.append(self.parse_payload(self.buffer[start + 1:end]))
            self.buffer = self.buffer[end + 1:]
        if len(self.buffer) > self.max_buffer:
            self.logger.debug(
                'Resetting frame buffer (%d chars)', len(self.buffer))
            self.buffer = ''
            self.resets += 1
        return frames

    def parse_payload(self, payload):
        values = {}
        for part in payload.split(','):
            key_value = part.split(':')
            if len(key_value) != 2:
                continue
            key = key_value[0].strip()
            if key not in self.keys:
                continue
            try:
                values[key] = int(key_value[1].strip())
            except ValueError:
                self.logger.debug('Ignoring %r in frame %r', part, payload)
        return values
