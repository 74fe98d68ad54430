"""Reading digit images from pixel files and CSV rows."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from digitnet.utility import (
    BATCH_SIZE,
    IMAGE_COLUMNS,
    IMAGE_ROWS,
    N_INPUT_NODES,
    TRAINING_ROWS,
    read_file,
    read_line,
)

_FILE_NUMBER = re.compile(r"[0-9.]+")
_CSV_NUMBER = re.compile(r"[0-9]+")


def _blank_pixels():
    return [0] * N_INPUT_NODES


@dataclass
class ImageData:
    """A labelled greyscale image of N_INPUT_NODES pixels."""

    digit: int = 0
    pixels: list[int] = field(default_factory=_blank_pixels)

    def __post_init__(self):
        if len(self.pixels) != N_INPUT_NODES:
            raise ValueError(f"an image has {N_INPUT_NODES} pixels, got {len(self.pixels)}")


def _to_pixel(value):
    return value % 256


def _fill_pixels(values):
    if len(values) > N_INPUT_NODES:
        raise ValueError(f"more than {N_INPUT_NODES} pixel values")
    return values + [0] * (N_INPUT_NODES - len(values))


def parse_input_file(digit, filepath):
    """Read pixel values from a file of numbers; missing pixels stay zero."""
    values = []
    for number in _FILE_NUMBER.findall(read_file(filepath)):
        whole = number.split(".", 1)[0]
        if not whole:
            raise ValueError(f"invalid pixel value {number!r}")
        values.append(_to_pixel(int(whole)))
    return ImageData(digit=digit, pixels=_fill_pixels(values))


def parse_csv_row(text):
    """Parse a ``label,pixel,pixel,...`` row."""
    numbers = _CSV_NUMBER.findall(text)
    if not numbers:
        raise ValueError("row holds no values")
    digit, *pixels = (int(number) for number in numbers)
    return ImageData(digit=digit, pixels=_fill_pixels([_to_pixel(p) for p in pixels]))


def get_row_data(row, csv_path):
    """Read and parse row ``row`` (1-based) of a CSV file."""
    return parse_csv_row(read_line(row, csv_path))


def get_batched_training_data(start_row, csv_path):
    """Read BATCH_SIZE consecutive rows, wrapping after TRAINING_ROWS."""
    return [
        get_row_data((start_row + offset - 1) % TRAINING_ROWS + 1, csv_path)
        for offset in range(BATCH_SIZE)
    ]


def num_digits(n):
    """Number of decimal digits of a non-negative integer."""
    if n < 0:
        raise ValueError("num_digits needs a non-negative number")
    if n == 0:
        return 1
    return math.floor(math.log10(n)) + 1


def format_data(data):
    """Render an image as its label followed by a grid of right-aligned pixels."""
    lines = [f"Digit: {data.digit}\n"]
    for start in range(0, IMAGE_ROWS * IMAGE_COLUMNS, IMAGE_COLUMNS):
        row = data.pixels[start:start + IMAGE_COLUMNS]
        lines.append("".join(" " * (4 - num_digits(p)) + str(p) for p in row) + "\n")
    return "".join(lines)