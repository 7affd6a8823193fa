"""Flows the text into lines and maps horizontal positions to words."""

import collections

from PIL import ImageFont

from artkit import util

from . import settings


WordBox = collections.namedtuple('WordBox', ('x', 'y', 'width', 'height'))


class TextMeasurer:
    """Text widths in pixels, measured with Pillow.

    Falls back to Pillow's built in font if the TrueType files are not
    installed.
    """

    def __init__(self, font=settings.FONT, bold_font=settings.BOLD_FONT,
                 logger=None):
        self.paths = {False: font, True: bold_font}
        self.logger = logger or util.NoLogger()
        self.fonts = {}
        self.widths = {}

    def font(self, size, bold=False):
        key = (size, bold)
        if key not in self.fonts:
            try:
                self.fonts[key] = ImageFont.truetype(self.paths[bold], size)
            except OSError:
                self.logger.warning('Cannot load %s, using default font',
                                    self.paths[bold])
                self.fonts[key] = ImageFont.load_default(size=size)
        return self.fonts[key]

    def __call__(self, text, size, bold=False):
        key = (text, size, bold)
        if key not in self.widths:
            self.widths[key] = self.font(size, bold).getlength(text)
        return self.widths[key]


class WordLayout:

    def __init__(self, boxes):
        self.boxes = boxes

    def __len__(self):
        return len(self.boxes)

    def __getitem__(self, index):
        return self.boxes[index]

    def line(self, index):
        """Indices of the words on the same line as word `index`."""
        y = self.boxes[index].y
        return [i for i, box in enumerate(self.boxes) if box.y == y]

    def word_near(self, index, ratio):
        """Word on the line of `index` closest to `ratio` along that line."""
        if not 0 <= index < len(self.boxes):
            return None
        line = self.line(index)
        first, last = self.boxes[line[0]], self.boxes[line[-1]]
        x = util.lerp(first.x, last.x + last.width, ratio)
        return min(line, key=lambda i: abs(
            self.boxes[i].x + self.boxes[i].width / 2 - x))


def layout_words(words, current, measure, width, left=settings.LEFT,
                 top=settings.TOP, line_height=settings.LINE_HEIGHT,
                 margin=settings.MARGIN):
    """Returns `WordLayout` of `words`, the `current` one set larger/bold.

    `measure(text, size, bold)` returns the width of `text` in pixels.
    """
    max_width = width - margin
    x, y = left, top
    boxes = []
    for i, word in enumerate(words):
        is_current = i == current
        size = settings.CURRENT_SIZE if is_current else settings.WORD_SIZE
        w = measure(word + ' ', size, is_current)
        if x + w > max_width:
            x = left
            y += line_height
        boxes.append(WordBox(x, y, w, line_height))
        x += w
    return WordLayout(boxes)
