"""Reads text chunks from an Arduino on a serial port.

Blocking reads run in the loop's executor, the decoded chunks are handed to
`on_chunk()` on the event loop thread. Exceptions raised by `on_chunk()` are
logged and the loop carries on. A read error ends the loop; the user has to
connect again.

`python -m artkit.serial_io` lists available ports.
"""

import asyncio
import codecs
import glob

import serial
import serial.tools.list_ports

from . import util


DEFAULT_DEV_GLOBS = ('/dev/cu.usbmodem*', '/dev/ttyACM*', '/dev/ttyUSB*')


def find_device(dev_globs):
    """Returns alphabetically first path matching any of `dev_globs`."""
    paths = sorted([p for path in dev_globs for p in glob.glob(path)])
    return paths[0] if paths else None


class SerialLink:

    def __init__(self, on_chunk, logger, dev_globs=DEFAULT_DEV_GLOBS,
                 baudrate=9600, timeout=0.5, record=None):
        self.on_chunk = on_chunk
        self.logger = logger
        self.dev_globs = dev_globs
        self.baudrate = baudrate
        self.timeout = timeout
        self.record = record
        self.stats = util.StreamingStats(logger)
        self.task = None
        self.running = False
        self.dev = None

    @property
    def connected(self):
        return self.task is not None and not self.task.done()

    def connect(self):
        """Starts the read loop (no-op if already running)."""
        if self.connected:
            self.logger.info('Serial already connected')
            return self.task
        self.task = asyncio.ensure_future(self.read_loop())
        return self.task

    def stop(self):
        self.running = False

    def open(self):
        path = find_device(self.dev_globs)
        if path is None:
            raise serial.SerialException(
                f'No device matching {list(self.dev_globs)}')
        self.logger.info('Opening device %s @%d', path, self.baudrate)
        return serial.Serial(path, baudrate=self.baudrate,
                             timeout=self.timeout)

    def read_chunk(self):
        return self.dev.read(max(1, self.dev.in_waiting))

    async def read_loop(self):
        loop = asyncio.get_event_loop()
        try:
            self.dev = await loop.run_in_executor(None, self.open)
        except (serial.SerialException, OSError) as e:
            self.logger.error('Connection failed: %s', e)
            return
        decoder = codecs.getincrementaldecoder('utf8')(errors='replace')
        on_chunk = util.print_exc(self.on_chunk, self.logger)
        self.running = True
        self.logger.info('Arduino connected!')
        try:
            while self.running:
                try:
                    data = await loop.run_in_executor(None, self.read_chunk)
                except (serial.SerialException, OSError) as e:
                    self.logger.error('Read error: %s', e)
                    break
                if not data:
                    continue
                text = decoder.decode(data)
                if not text:
                    continue
                if self.record:
                    self.record(text)
                self.stats('serial', text)
                on_chunk(text)
        finally:
            self.running = False
            self.logger.info('Closing %s', self.dev.port)
            self.dev.close()
            self.dev = None


if __name__ == '__main__':
    for port in serial.tools.list_ports.comports():
        print('{} "{}" hwid={}'.format(
            port.device, port.description, port.hwid))
