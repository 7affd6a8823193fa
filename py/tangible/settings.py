"""Defaults for tangible words."""

TITLE = 'Human Centered Design'
SUBTITLE = 'Tangible User Interface'

TEXT = (
    "What is Experience Prototyping? First, let's think for a moment about "
    "what we mean by experience. Experience is a very dynamic, complex and "
    "subjective phenomenon. It depends upon the perception of multiple "
    "sensory qualities of a design, interpreted through filters relating to "
    "contextual factors. For example, what is the experience of a run down a "
    "mountain on a snowboard? It depends upon the weight and material "
    "qualities of the board, the bindings and your boots, the snow "
    "conditions, the weather, the terrain, the temperature of air in your "
    "hair, your skill level, your current state of mind, the mood and "
    "expression of your companions. The experience of even simple artifacts "
    "does not exist in a vacuum but, rather, in dynamic relationship with "
    "other people, places and objects. Additionally, the quality of people's "
    "experience changes over time as it is influenced by variations in these "
    "multiple contextual factors. With respect to prototyping, our "
    "understanding of experience is close to what Houde and Hill call the "
    "look and feel of a product or system, that is the concrete sensory "
    "experience of using an artifact — what the user looks at, feels and "
    "hears while using it."
)

# speech
SPEECH_RATE = .9
SPEECH_VOLUME = 1.
SPEECH_LANG = 'en_US'

# photocells
BASELINE_DEFAULT = 1020
BASELINE_LATCH = 1000
HAND_THRESHOLD = 970
# 'all': every photocell has to be covered, 'any': one is enough
HAND_MODE = 'all'
HAND_RATIO_ALPHA = .25

# FSR and lift
FSR_MIN = 300
FSR_MAX = 700
FSR_UP = .35
FSR_DOWN = .15
LIFT_DEAD_ZONE = 30
LIFT_RANGE = 200
LIFT_ALPHA = .15

# layout
WIDTH, HEIGHT = 1280, 800
LEFT = 80
TOP = 150
LINE_HEIGHT = 45
MARGIN = 160
CURRENT_SIZE = 28
WORD_SIZE = 20
FONT = 'DejaVuSans.ttf'
BOLD_FONT = 'DejaVuSans-Bold.ttf'

# word style
CURRENT_COLOR = (220, 100, 50)
WORD_COLOR = (60, 70, 80)
PRESSED_COLOR = (255, 30, 30)
MAX_GROW = 18
PRESSED_SHAKE = 3
HOVER_SHAKE = 6

# hand shadow
SHADOW_RANGE = (800, 1020)
SHADOW_INTENSITY = (180, 20)
SHADOW_SIZE = (1., 1.8)
SHADOW_LAYERS = (2, 8)
SHADOW_BLUR = (2, 20)
SHADOW_MORPH = (.35, .55)
SHADOW_CORE_ALPHA = (.8, .2)
HAND_FOLLOW = .1

# lifted word
LIFT_SHADOW_LAYERS = (3, 8)
LIFT_SHADOW_OFFSET = (3, 12)
LIFT_SHADOW_ALPHA = (150, 60)
LIFT_GROW = 120
LIFT_SHADOW_GROW = 80
LIFT_RISE = 150
LIFT_DRIFT = 30
LIFT_SHAKE = 3
