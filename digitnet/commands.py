"""Interactive command console for training and using a digit network."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Iterable
from contextlib import contextmanager

from digitnet.dataparser import get_batched_training_data, get_row_data, parse_input_file
from digitnet.network import NeuralNetwork
from digitnet.utility import (
    BATCH_SIZE,
    N_OUTPUT_NODES,
    TRAINING_ROWS,
    categorical_cross_entropy,
    seed_random,
    true_outputs,
)

DEFAULT_TRAIN_PATH = "./data/mnistdata/mnist_train.csv"
DEFAULT_TEST_PATH = "./data/mnistdata/mnist_test.csv"

_HELP_TEXT = (
    "help:\n- Shows this menu.\n"
    "train [no. epochs]:\n- Train the model with the number of epochs specified. "
    "One epoch goes through all of the training data. Default of 1 epoch.\n"
    "trainb [no. batches]:\n- Train the model with the number of batches specified. "
    f"One batch uses {BATCH_SIZE} images. Default of 1 batch.\n"
    "test [no. iterations]:\n- Test the model with the number of iterations specified. "
    "One iteration uses one image. Accuracy will be printed at the end.\n"
    "lr [learning rate]:\n- Set the learning rate of the model. Default value is 0.001. "
    "Large values may break the model.\n"
    "save [save path]\n- Save model data to the specified save file.\n"
    "load [save path]:\n- Load model data from the specified save file.\n"
    "id [image data path] [optional: correct digit]\n- Identify a digit in the data provided. "
    "If the correct digit is provided, a loss value will be printed.\n"
    "read [no. lines] [optional: path]\n- Test the time taken to read the specified number "
    "of lines from a file, and convert into input data. If no path is given, the default "
    "training CSV will be used.\n"
    "read-batch [no. batches] [optional: path]\n- Test the time taken to read the specified "
    "number of batches from a file. If no path is given, the default training CSV will be used.\n"
)


class _Timer:
    milliseconds = 0


@contextmanager
def _timed():
    timer = _Timer()
    start = time.perf_counter()
    try:
        yield timer
    finally:
        timer.milliseconds = int((time.perf_counter() - start) * 1000)


class Console:
    """Reads commands line by line and applies them to one network."""

    def __init__(self, network, out):
        self.network = network
        self.out = out
        self.train_path = DEFAULT_TRAIN_PATH
        self.test_path = DEFAULT_TEST_PATH
        self._handlers = {
            "help": self._help,
            "save": self._save,
            "load": self._load,
            "id": self._identify,
            "lr": self._learning_rate,
            "train": self._train,
            "trainb": self._train_batches,
            "test": self._test,
            "read": self._read,
            "read-batch": self._read_batch,
        }

    def _print(self, text=""):
        self.out.write(f"{text}\n")

    def _has_args(self, args, usage):
        if len(args) < 2:
            self._print("Insufficient arguments")
            self._print(f"Usage: {usage}")
            return False
        return True

    def execute(self, line):
        """Run one command line; return False when the console should stop."""
        args = line.split()
        if not args:
            return True
        command = args[0]
        if command == "exit":
            return False
        handler = self._handlers.get(command)
        if handler is not None:
            handler(args)
        return True

    def run(self, lines: Iterable[str]):
        """Prompt for and execute commands until ``exit`` or the end of ``lines``."""
        for line in lines:
            self.out.write("> ")
            try:
                if not self.execute(line.rstrip("\n")):
                    break
            except (ValueError, OSError, IndexError) as error:
                self._print(f"Error: {error}")

    def _help(self, args):
        self.out.write(_HELP_TEXT)

    def _save(self, args):
        if not self._has_args(args, "save [save path]"):
            return
        savepath = args[1]
        try:
            self.network.save_model(savepath)
        except OSError:
            self._print(f"Failed to open file: {savepath}")
            return
        self._print(f"Saved model data to {savepath}")

    def _load(self, args):
        if not self._has_args(args, "load [save path]"):
            return
        savepath = args[1]
        for message in self.network.load_model(savepath):
            self._print(message)
        self._print(f"Uploaded data from {savepath}")

    def _identify(self, args):
        if not self._has_args(args, "id [image data path] [optional: digit]"):
            return
        digit = int(args[2]) if len(args) >= 3 else None
        data = parse_input_file(digit if digit is not None else 0, args[1])
        outputs = [float(p) for p in self.network.get_outputs(data.pixels)[0]]

        largest = 0.0
        best = -1
        for index, probability in enumerate(outputs):
            self._print(f"{index}: {probability:g}")
            if probability > largest:
                largest = probability
                best = index
        self._print(f"Identified digit: {best} ({largest:g} probability)")

        if digit is not None:
            loss = categorical_cross_entropy(true_outputs(digit), outputs[:N_OUTPUT_NODES])
            self._print(f"CCE Loss: {loss:g} (lower means more accurate)")

    def _learning_rate(self, args):
        if not self._has_args(args, "lr [learning rate]"):
            return
        rate = float(args[1])
        self.network.learning_rate = rate
        self._print(f"Set learning rate to {rate:g}")

    def _train(self, args):
        epochs = int(args[1]) if len(args) > 1 else 1
        batches = epochs * TRAINING_ROWS // BATCH_SIZE
        self._print("Training...")
        with _timed() as timer:
            self.network.train(batches, self.train_path)
        self._print(f"Training complete for {epochs} epochs in {timer.milliseconds} ms.")

    def _train_batches(self, args):
        batches = int(args[1]) if len(args) > 1 else 1
        self._print("Training...")
        with _timed() as timer:
            self.network.train(batches, self.train_path)
        self._print(f"Training complete for {batches} batches in {timer.milliseconds} ms.")

    def _test(self, args):
        iterations = int(args[1]) if len(args) > 1 else 1
        self._print("Testing...")
        with _timed() as timer:
            result = self.network.test(iterations, self.test_path)
        self._print(f"Testing complete for {iterations} iterations in {timer.milliseconds} ms.")
        self._print(f"Correct: {result.correct}, incorrect: {result.incorrect}")
        self._print(f"Accuracy: {result.accuracy():g}% ({result.correct}/{result.total})")

    def _read(self, args):
        if not self._has_args(args, "read [no. lines] [optional: path]"):
            return
        lines = int(args[1])
        path = args[2] if len(args) > 2 else self.train_path
        with _timed() as timer:
            for line in range(1, lines):
                get_row_data((line - 1) % TRAINING_ROWS + 1, path)
        self._print(f"Processed {lines} lines in {timer.milliseconds} ms.")

    def _read_batch(self, args):
        if not self._has_args(args, "read-batch [no. batches] [optional: path]"):
            return
        batches = int(args[1])
        path = args[2] if len(args) > 2 else self.train_path
        with _timed() as timer:
            for batch in range(batches):
                get_batched_training_data(batch * BATCH_SIZE + 1, path)
        self._print(f"Processed {batches} batches in {timer.milliseconds} ms.")


def main(argv=None):
    """Start the interactive console on standard input and output."""
    parser = argparse.ArgumentParser(description="Train and use a digit-recognition network.")
    parser.parse_args(argv)
    seed_random()
    Console(NeuralNetwork(), sys.stdout).run(sys.stdin)
    return 0