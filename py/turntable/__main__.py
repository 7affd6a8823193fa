"""Runs the eccentric turntable (`python -m turntable --help`)."""

import argparse
import functools
import os

from artkit import audio
from artkit import capture
from artkit import frames
from artkit import mixer
from artkit import scheduler
from artkit import serial_io
from artkit import server
from artkit import sigint
from artkit import util

from . import control
from . import scene
from . import settings


parser = argparse.ArgumentParser(description='Eccentric turntable.')
parser.add_argument(
    '--assets', type=str, default='./assets/turntable',
    help='Directory with {}.'.format(', '.join(settings.TRACK_FILES)))
parser.add_argument(
    '--static', type=str, default=os.path.join(
        os.path.dirname(__file__), '..', '..', 'static', 'turntable'),
    help='Directory with the page painting the scene.')
parser.add_argument('--address', type=str, default='localhost')
parser.add_argument('--port', type=int, default=8080)
parser.add_argument('--fps', type=float, default=settings.FPS)
parser.add_argument(
    '--dev_glob', nargs='+', type=str, default=serial_io.DEFAULT_DEV_GLOBS,
    help='Glob to match device (alphabetically first match is used).')
parser.add_argument('--baudrate', type=int, default=9600)
parser.add_argument(
    '--connect', action='store_true',
    help='Connect to the Arduino right away (else via the page).')
parser.add_argument(
    '--audio_device', type=str, default=None,
    help='Prefix of the output device name (default device if not set).')
parser.add_argument('--no_audio', action='store_true')
parser.add_argument('--record', type=str, default=None,
                    help='Records serial input to this file.')
parser.add_argument('--replay', type=str, default=None,
                    help='Replays serial input from this file.')
parser.add_argument('--noloop', action='store_true',
                    help='Replay only once.')
parser.add_argument('--seed', type=int, default=None)
args = parser.parse_args()
logger = util.createLogger('turntable')
sigint.install()

tracks = [
    mixer.load_track(os.path.join(args.assets, name), logger, name)
    for name in settings.TRACK_FILES
]
noise = mixer.NoiseSource(settings.SAMPLE_RATE, settings.NOISE_HZ,
                          settings.NOISE_RES)
distortion = mixer.Distortion(settings.DISTORTION_DEFAULT)
turntable = control.Turntable(
    tracks, noise, distortion, scheduler.LoopScheduler(), logger=logger)
turntable_scene = scene.TurntableScene(turntable, seed=args.seed)
turntable.on_hop = turntable_scene.on_hop

frame_parser = frames.JsonLineParser(
    required=('pot', 'light'), defaults=dict(motor=0), logger=logger)


def on_chunk(text):
    for frame in frame_parser.feed(text):
        turntable.on_frame(frame)


record = capture.CaptureWriter(args.record) if args.record else None
link = serial_io.SerialLink(on_chunk, logger, args.dev_glob, args.baudrate,
                            record=record)

srv = server.Server(args.static, logger)
srv.run_periodically(server.PeriodicCallback(
    '/scene', turntable_scene, args.fps))
srv.add_command('connect', link.connect)
srv.add_command('play', turntable.toggle_music)
srv.add_command('calibrate', turntable.calibrate)
srv.add_command('lock', turntable.lock)
srv.add_command('unlock', turntable.stop_eccentric)

startup, shutdown = [], [link.stop]
if not args.no_audio:
    device_index = None
    if args.audio_device:
        device_index = audio.AudioInterface.get_index(args.audio_device)
    output = audio.AudioInterface(
        mixer.Mixer(settings.SAMPLE_RATE, tracks, noise, distortion,
                    settings.HIGHPASS_HZ),
        device_index=device_index, logger=logger)
    startup.append(output.start)
    shutdown.append(output.close)
if args.replay:
    startup.append(functools.partial(
        capture.replay, args.replay, on_chunk, not args.noloop, logger))
elif args.connect:
    startup.append(link.connect)
if record:
    shutdown.append(record.close)

srv.run(args.address, args.port, startup, shutdown)
