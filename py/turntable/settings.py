"""Defaults for the eccentric turntable."""

import collections


TrackInfo = collections.namedtuple(
    'TrackInfo', ('title', 'artist', 'color', 'bg_color'))

TRACKS = (
    TrackInfo('Just Give Me a Reason', 'P!nk ft. Nate Ruess',
              (255, 20, 147), (40, 10, 25)),
    TrackInfo('APT.', 'ROSÉ & Bruno Mars', (255, 0, 100), (40, 0, 20)),
    TrackInfo('Around Thirty', 'Kim Kwang Seok', (70, 130, 180), (10, 20, 30)),
    TrackInfo('Everglow', 'Coldplay', (138, 43, 226), (20, 10, 40)),
)
TRACK_FILES = ('song1.wav', 'song2.wav', 'song3.wav', 'song4.wav')
MAIN_TRACK = 0

# pot -> playback rate
POT_IDLE = 30
RATE_POINTS = ((10, .1), (600, 1.), (1023, 2.))

# light sensor
LIGHT_HISTORY = 30
ECCENTRIC_THRESHOLD = 80

# hop chain
HOP_BASE_MS = 2000
HOP_RATE_RANGE = (.1, 3.)
HOP_MS_RANGE = (500, 2800)
SELF_MIX_JITTER = (.85, 1.15)
CROSS_JITTER = (.9, 1.2)
OFFSET_MARGIN = .05

# scratch loop
SCRATCH_SECS = .12
SCRATCH_RATE_RANGE = (.1, 2.)
SCRATCH_RATE_JITTER = (.65, 1.35)
SCRATCH_JUMPS = (-.06, -.03, .03, .06)
SCRATCH_MIN_POS = .02
NOISE_AMP = (.02, .06)
NOISE_ATTACK = .02
NOISE_CLOSE_DELAY = .09
NOISE_RELEASE = .06
NOISE_STOP_RELEASE = .08
DISTORTION_CHANCE = .25
DISTORTION_RANGE = (.05, .14)
DISTORTION_DEFAULT = .08
DISTORTION_RESTORE_DELAY = .16

# audio
SAMPLE_RATE = 44100
NOISE_HZ = 2800
NOISE_RES = 6
HIGHPASS_HZ = 80

# scene
FPS = 60
WIDTH, HEIGHT = 1280, 800
POEM = (
    'needle drifts / vinyl breathes',
    'a pink spark, a midnight bruise',
    'scratches become syllables',
    'turn, turn — the room remembers',
)
POEM_FRAMES = 30
PARTICLES = 36
PARTICLE_DIST = (220, 280)
PARTICLE_FORCE = (8, 22)
PARTICLE_SIZE = (2, 4)
PARTICLE_DAMPING = .93
PARTICLE_FADE = .95
PARTICLE_MIN_ALPHA = 5
ALBUM_SIZE = 400
ALBUM_JITTER = 26
ALBUM_ROTATION = .6
PULSE_RADIUS = 180
PULSE_AMPLITUDE = 8
PULSE_SPEED = .3
SCANLINES = 6
GLITCH_BARS = 3
