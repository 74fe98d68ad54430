"""A two-hidden-layer feed-forward network for classifying digit images."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from digitnet.dataparser import get_batched_training_data, get_row_data
from digitnet.matrix import Matrix, random_elements
from digitnet.utility import (
    BATCH_SIZE,
    HIDDEN_LAYER_1_SIZE,
    HIDDEN_LAYER_2_SIZE,
    N_INPUT_NODES,
    N_OUTPUT_NODES,
    TESTING_ROWS,
    TRAINING_ROWS,
    batched_true_outputs,
)

_LEAK = 0.01
_LAYER_NAMES = ("hidden layer one", "hidden layer two", "the output layer")


@dataclass
class TestingData:
    """Counts of correct and incorrect predictions."""

    correct: int = 0
    incorrect: int = 0

    @property
    def total(self):
        return self.correct + self.incorrect

    def accuracy(self):
        """Percentage of correct predictions (NaN when nothing was tested)."""
        if self.total == 0:
            return math.nan
        return 100.0 * self.correct / self.total


def _view(matrix):
    return matrix.elements.reshape(matrix.rows, matrix.columns)


def _leaky_relu(z):
    return np.where(z > 0, z, np.float32(_LEAK) * z)


def _leaky_relu_slope(activations):
    return np.where(activations > 0, np.float32(1.0), np.float32(_LEAK))


def _softmax(z):
    shifted = np.exp(z - z.max(axis=0, keepdims=True))
    return shifted / np.maximum(shifted.sum(axis=0, keepdims=True), np.float32(1e-15))


def _as_images(inputs):
    values = np.asarray(inputs, dtype=np.float32)
    if values.ndim == 1:
        if values.size == 0 or values.size % N_INPUT_NODES:
            raise ValueError(
                f"input length must be a positive multiple of {N_INPUT_NODES}, got {values.size}"
            )
        values = values.reshape(-1, N_INPUT_NODES)
    elif values.ndim != 2 or values.shape[1] != N_INPUT_NODES or values.shape[0] == 0:
        raise ValueError(f"inputs must have {N_INPUT_NODES} pixels per image, got shape {values.shape}")
    return values / np.float32(255.0)


def _predict(probabilities):
    best = int(np.argmax(probabilities))
    return best if probabilities[best] > 0 else -1


class NeuralNetwork:
    """Input layer, two leaky-ReLU hidden layers and a softmax output layer."""

    def __init__(self):
        bound = math.sqrt(2.0 / N_INPUT_NODES)

        def weights(rows, columns):
            return Matrix(rows, columns, random_elements(rows * columns, -bound, bound))

        self.h1_weights = weights(HIDDEN_LAYER_1_SIZE, N_INPUT_NODES)
        self.h2_weights = weights(HIDDEN_LAYER_2_SIZE, HIDDEN_LAYER_1_SIZE)
        self.out_weights = weights(N_OUTPUT_NODES, HIDDEN_LAYER_2_SIZE)

        self.h1_biases = Matrix(HIDDEN_LAYER_1_SIZE, 1)
        self.h2_biases = Matrix(HIDDEN_LAYER_2_SIZE, 1)
        self.out_biases = Matrix(N_OUTPUT_NODES, 1)

        self.h1_nodes = Matrix(HIDDEN_LAYER_1_SIZE, BATCH_SIZE)
        self.h2_nodes = Matrix(HIDDEN_LAYER_2_SIZE, BATCH_SIZE)
        self.out_nodes = Matrix(N_OUTPUT_NODES, BATCH_SIZE)

        self.learning_rate = 0.001
        # L2 regularisation strength applied to weight updates.
        self.regularisation = 0.0
        self.current_row = 1
        self.testing_row = 1

    def _parameters(self):
        weights = (self.h1_weights, self.h2_weights, self.out_weights)
        biases = (self.h1_biases, self.h2_biases, self.out_biases)
        return [
            *((m, "weights", "randomised", name) for m, name in zip(weights, _LAYER_NAMES)),
            *((m, "biases", "as zero", name) for m, name in zip(biases, _LAYER_NAMES)),
        ]

    def get_outputs(self, inputs):
        """Return softmax probabilities, one row of N_OUTPUT_NODES per input image.

        ``inputs`` holds raw 0-255 pixel values, either flat (images one after
        another) or as one row per image.
        """
        images = _as_images(inputs).T
        count = images.shape[1]

        h1 = _leaky_relu(_view(self.h1_weights) @ images + _view(self.h1_biases))
        h2 = _leaky_relu(_view(self.h2_weights) @ h1 + _view(self.h2_biases))
        out = _view(self.out_weights) @ h2 + _view(self.out_biases)

        self.h1_nodes = Matrix(HIDDEN_LAYER_1_SIZE, count, h1)
        self.h2_nodes = Matrix(HIDDEN_LAYER_2_SIZE, count, h2)
        self.out_nodes = Matrix(N_OUTPUT_NODES, count, out)

        return _softmax(out).T.astype(np.float32)

    def train(self, batches, trainpath, newpath=False):
        """Run ``batches`` mini-batch gradient descent steps on rows of a training CSV."""
        if newpath:
            self.current_row = 1

        for _ in range(batches):
            images = get_batched_training_data(self.current_row, trainpath)
            self.current_row = (self.current_row + BATCH_SIZE - 1) % TRAINING_ROWS + 1

            targets = np.array(
                batched_true_outputs(image.digit for image in images), dtype=np.float32
            ).reshape(BATCH_SIZE, N_OUTPUT_NODES).T
            pixels = np.array([image.pixels for image in images], dtype=np.float32)

            probabilities = self.get_outputs(pixels).T
            inputs = _as_images(pixels).T
            h1 = _view(self.h1_nodes)
            h2 = _view(self.h2_nodes)

            out_weights = _view(self.out_weights)
            h2_weights = _view(self.h2_weights)
            h1_weights = _view(self.h1_weights)

            out_deltas = probabilities - targets
            h2_deltas = (out_weights.T @ out_deltas) * _leaky_relu_slope(h2)
            h1_deltas = (h2_weights.T @ h2_deltas) * _leaky_relu_slope(h1)

            layers = (
                (self.out_weights, self.out_biases, out_deltas, h2),
                (self.h2_weights, self.h2_biases, h2_deltas, h1),
                (self.h1_weights, self.h1_biases, h1_deltas, inputs),
            )
            updates = []
            for weights, biases, deltas, previous in layers:
                clipped = np.clip(deltas, -1.0, 1.0)
                updates.append((weights, biases, clipped @ previous.T, clipped.sum(axis=1, keepdims=True)))

            step = np.float32(self.learning_rate / BATCH_SIZE)
            reg = np.float32(self.regularisation)
            for weights, biases, weight_grad, bias_grad in updates:
                grid = _view(weights)
                grid -= step * (weight_grad + reg * grid)
                _view(biases)[:] -= step * bias_grad

    def test(self, iterations, testpath, newpath=False):
        """Classify ``iterations`` rows of a testing CSV and count the hits."""
        if newpath:
            self.testing_row = 1

        result = TestingData()
        for _ in range(iterations):
            data = get_row_data(self.testing_row, testpath)
            probabilities = self.get_outputs(data.pixels)[0]
            self.testing_row = self.testing_row % TESTING_ROWS + 1

            if _predict(probabilities) == data.digit:
                result.correct += 1
            else:
                result.incorrect += 1
        return result

    def save_model(self, savepath):
        """Write weights and biases, one matrix per line, to ``savepath``."""
        lines = [
            "".join(f"{float(value):.9g} " for value in matrix.elements)
            for matrix, *_ in self._parameters()
        ]
        with open(savepath, "w") as handle:
            handle.write("\n".join(lines))

    def load_model(self, savepath):
        """Load weights and biases written by ``save_model``.

        Returns a message for every matrix whose line held too few values;
        the values not given keep what they had.
        """
        lines = Path(savepath).read_text().splitlines()
        parameters = self._parameters()
        if len(lines) < len(parameters):
            raise ValueError(
                f"{savepath} has {len(lines)} lines, expected {len(parameters)}"
            )

        messages = []
        for line, (matrix, kind, state, layer) in zip(lines, parameters):
            size = matrix.elements.size
            values = [float(token) for token in line.split()[:size]]
            matrix.elements[: len(values)] = values
            if len(values) < size:
                messages.append(
                    f"Not enough {kind} for {layer} ({len(values)}/{size}), "
                    f"some {kind} remain {state}."
                )
        return messages