"""Network dimensions, random numbers, file reading, activations and losses."""

from __future__ import annotations

import math
import os
import random
from collections.abc import Iterable, Sequence
from pathlib import Path

IMAGE_ROWS = 28
IMAGE_COLUMNS = 28

N_INPUT_NODES = IMAGE_ROWS * IMAGE_COLUMNS
N_OUTPUT_NODES = 10

N_HIDDEN_LAYERS = 2
HIDDEN_LAYER_1_SIZE = 128
HIDDEN_LAYER_2_SIZE = HIDDEN_LAYER_1_SIZE // 2

N_HIDDEN_NODES = HIDDEN_LAYER_1_SIZE + HIDDEN_LAYER_2_SIZE

# Excludes the input layer.
N_LAYERS = N_HIDDEN_LAYERS + 1

TRAINING_ROWS = 60000
TESTING_ROWS = 10000

BATCH_SIZE = 32

EPSILON = 1e-15

_rng = random.Random()


def seed_random(seed=None):
    """Seed the shared random number generator (time based when seed is None)."""
    _rng.seed(seed)


def random_float(low=0.0, high=1.0):
    """Return a uniformly distributed float between low and high."""
    return _rng.random() * (high - low) + low


class LineReader:
    """Reads single lines from a text file, remembering where lines start.

    Offsets are kept for the most recently used file only; switching to a
    different path discards them.
    """

    def __init__(self):
        self._path: str | None = None
        self._offsets: list[int] = [0]

    def read_line(self, line, filepath):
        """Return line number ``line`` (1-based) of ``filepath`` without its newline."""
        if line < 1:
            raise ValueError(f"line numbers start at 1, got {line}")
        path = os.fspath(filepath)
        with open(path, "rb") as handle:
            if path != self._path:
                self._path = path
                self._offsets = [0]

            current = min(line, len(self._offsets))
            handle.seek(self._offsets[current - 1])

            while True:
                raw = handle.readline()
                if not raw:
                    raise IndexError(f"line {line} is beyond the end of {path}")
                if current == len(self._offsets):
                    self._offsets.append(handle.tell())
                if current == line:
                    break
                current += 1

        if raw.endswith(b"\n"):
            raw = raw[:-1]
        return raw.decode()


_default_reader = LineReader()


def read_line(line, filepath):
    """Read one line (1-based) using the shared line reader."""
    return _default_reader.read_line(line, filepath)


def read_file(filepath):
    """Return the whole contents of a text file."""
    return Path(filepath).read_text()


def true_outputs(digit):
    """Return the one-hot target vector for ``digit``."""
    if not 0 <= digit < N_OUTPUT_NODES:
        raise ValueError(f"digit must be between 0 and {N_OUTPUT_NODES - 1}, got {digit}")
    targets = [0] * N_OUTPUT_NODES
    targets[digit] = 1
    return targets


def batched_true_outputs(digits: Iterable[int]):
    """Return the one-hot targets of several digits, concatenated."""
    return [value for digit in digits for value in true_outputs(digit)]


def sigmoid(z):
    """Logistic function."""
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    exp_z = math.exp(z)
    return exp_z / (1.0 + exp_z)


def relu(z):
    """Rectified linear unit."""
    return max(0.0, z)


def leaky_relu(z):
    """Rectified linear unit with a slope of 0.01 below zero."""
    return z if z > 0 else 0.01 * z


def tanh(z):
    """Hyperbolic tangent."""
    return math.tanh(z)


def categorical_cross_entropy(true_outputs: Sequence[float], softmax_outputs: Sequence[float]):
    """Cross-entropy of softmax predictions against one-hot targets."""
    if len(true_outputs) != len(softmax_outputs):
        raise ValueError("targets and predictions differ in length")
    loss = 0.0
    for target, predicted in zip(true_outputs, softmax_outputs):
        if predicted == 0.0:
            predicted = EPSILON
        loss += float(target) * -math.log(predicted)
    return loss


def mean_squared_error(true_outputs: Sequence[float], softmax_outputs: Sequence[float]):
    """Mean of the signed errors (target minus prediction) over all outputs."""
    if len(true_outputs) != len(softmax_outputs):
        raise ValueError("targets and predictions differ in length")
    if not true_outputs:
        raise ValueError("no outputs given")
    total = sum(float(t) - float(p) for t, p in zip(true_outputs, softmax_outputs))
    return total / len(true_outputs)