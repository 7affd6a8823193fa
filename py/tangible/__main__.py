"""Runs tangible words (`python -m tangible --help`)."""

import argparse
import functools
import os

from artkit import capture
from artkit import frames
from artkit import scheduler
from artkit import serial_io
from artkit import server
from artkit import sigint
from artkit import speech
from artkit import tts
from artkit import util

from . import control
from . import layout
from . import scene
from . import settings


parser = argparse.ArgumentParser(description='Tangible words.')
parser.add_argument(
    '--static', type=str, default=os.path.join(
        os.path.dirname(__file__), '..', '..', 'static', 'tangible'),
    help='Directory with the page painting the scene.')
parser.add_argument('--address', type=str, default='localhost')
parser.add_argument('--port', type=int, default=8080)
parser.add_argument('--fps', type=float, default=60)
parser.add_argument('--width', type=int, default=settings.WIDTH)
parser.add_argument('--height', type=int, default=settings.HEIGHT)
parser.add_argument(
    '--dev_glob', nargs='+', type=str, default=serial_io.DEFAULT_DEV_GLOBS,
    help='Glob to match device (alphabetically first match is used).')
parser.add_argument('--baudrate', type=int, default=9600)
parser.add_argument(
    '--connect', action='store_true',
    help='Connect to the Arduino right away (else via the page).')
parser.add_argument(
    '--speech', choices=('pyttsx3', 'silent'), default='pyttsx3',
    help='"silent" only moves through the words, without audio.')
parser.add_argument(
    '--hand_mode', choices=('all', 'any'), default=settings.HAND_MODE,
    help='Whether all or any photocell has to be covered to pause.')
parser.add_argument('--font', type=str, default=settings.FONT)
parser.add_argument('--bold_font', type=str, default=settings.BOLD_FONT)
parser.add_argument('--record', type=str, default=None,
                    help='Records serial input to this file.')
parser.add_argument('--replay', type=str, default=None,
                    help='Replays serial input from this file.')
parser.add_argument('--noloop', action='store_true',
                    help='Replay only once.')
args = parser.parse_args()
logger = util.createLogger('tangible')
sigint.install()

sched = scheduler.LoopScheduler()
if args.speech == 'pyttsx3':
    engine = tts.Pyttsx3Speech(
        sched, rate=settings.SPEECH_RATE, volume=settings.SPEECH_VOLUME,
        lang=settings.SPEECH_LANG, logger=logger)
else:
    engine = speech.SilentSpeech(sched, logger=logger)
words = control.TangibleWords(engine, hand_mode=args.hand_mode, logger=logger)
measure = layout.TextMeasurer(args.font, args.bold_font, logger=logger)
words_scene = scene.TangibleScene(words, measure, args.width, args.height)

frame_parser = frames.BracketParser(
    keys=('FSR', 'P1', 'P2'), logger=logger)


def on_chunk(text):
    for frame in frame_parser.feed(text):
        words.on_frame(frame)


record = capture.CaptureWriter(args.record) if args.record else None
link = serial_io.SerialLink(on_chunk, logger, args.dev_glob, args.baudrate,
                            record=record)

srv = server.Server(args.static, logger)
srv.run_periodically(server.PeriodicCallback(
    '/scene', words_scene, args.fps))
srv.add_command('connect', link.connect)
srv.add_command('start', words.start_reading)
srv.add_command('stop', words.stop_reading)

startup, shutdown = [engine.start], [link.stop, engine.close]
if args.replay:
    startup.append(functools.partial(
        capture.replay, args.replay, on_chunk, not args.noloop, logger))
elif args.connect:
    startup.append(link.connect)
if record:
    shutdown.append(record.close)

srv.run(args.address, args.port, startup, shutdown)
