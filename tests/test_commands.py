import io

import numpy as np
import pytest

from digitnet.commands import Console
from digitnet.network import NeuralNetwork
from digitnet.utility import BATCH_SIZE, N_INPUT_NODES, N_OUTPUT_NODES, seed_random


@pytest.fixture
def console():
    seed_random(7)
    return Console(NeuralNetwork(), io.StringIO())


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "digits.csv"
    rows = []
    for row in range(BATCH_SIZE):
        digit = row % N_OUTPUT_NODES
        pixels = [(row * 7 + i) % 256 for i in range(N_INPUT_NODES)]
        rows.append(",".join(str(v) for v in [digit, *pixels]))
    path.write_text("\n".join(rows) + "\n")
    return path


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "image.txt"
    path.write_text(" ".join(str(i % 256) for i in range(N_INPUT_NODES)))
    return path


def test_exit_stops(console):
    assert console.execute("exit") is False
    assert console.execute("help") is True


def test_blank_and_unknown_commands_print_nothing(console):
    assert console.execute("   ") is True
    assert console.execute("frobnicate 3") is True
    assert console.out.getvalue() == ""


def test_help_mentions_batch_size(console):
    console.execute("help")
    text = console.out.getvalue()
    assert f"One batch uses {BATCH_SIZE} images." in text
    assert "trainb [no. batches]" in text


def test_save_without_path(console):
    console.execute("save")
    assert console.out.getvalue() == "Insufficient arguments\nUsage: save [save path]\n"


def test_learning_rate(console):
    console.execute("lr 0.5")
    assert console.network.learning_rate == 0.5
    assert "Set learning rate to 0.5" in console.out.getvalue()


def test_learning_rate_rejects_text(console):
    with pytest.raises(ValueError):
        console.execute("lr fast")


def test_run_stops_at_exit(console):
    console.run(["lr 0.25\n", "exit\n", "lr 0.75\n"])
    assert console.network.learning_rate == 0.25


def test_run_reports_errors_and_continues(console):
    console.run(["lr nope", "lr 0.125"])
    assert console.network.learning_rate == 0.125
    assert "Error:" in console.out.getvalue()


def test_save_and_load_round_trip(console, tmp_path):
    save = tmp_path / "model.txt"
    console.execute(f"save {save}")
    assert f"Saved model data to {save}" in console.out.getvalue()

    seed_random(99)
    other = Console(NeuralNetwork(), io.StringIO())
    other.execute(f"load {save}")
    assert other.out.getvalue() == f"Uploaded data from {save}\n"
    assert np.array_equal(other.network.h1_weights.elements, console.network.h1_weights.elements)
    assert np.array_equal(other.network.out_weights.elements, console.network.out_weights.elements)


def test_identify_with_digit(console, image_path):
    console.execute(f"id {image_path} 3")
    lines = console.out.getvalue().splitlines()
    probabilities = [float(line.split(": ")[1]) for line in lines[:N_OUTPUT_NODES]]
    assert sum(probabilities) == pytest.approx(1.0, rel=1e-4)
    identified = lines[N_OUTPUT_NODES]
    best = int(identified.split()[2])
    assert probabilities[best] == max(probabilities)
    assert lines[N_OUTPUT_NODES + 1].startswith("CCE Loss: ")
    loss = float(lines[N_OUTPUT_NODES + 1].split()[2])
    assert loss > 0


def test_identify_without_digit_has_no_loss(console, image_path):
    console.execute(f"id {image_path}")
    text = console.out.getvalue()
    assert "Identified digit:" in text
    assert "CCE Loss" not in text


def test_trainb_changes_weights(console, csv_path):
    console.train_path = str(csv_path)
    before = console.network.out_weights.elements.copy()
    console.execute("trainb 1")
    text = console.out.getvalue()
    assert text.startswith("Training...\n")
    assert "Training complete for 1 batches in" in text
    assert not np.array_equal(before, console.network.out_weights.elements)


def test_train_rejects_bad_epochs(console):
    with pytest.raises(ValueError):
        console.execute("train many")
    assert console.out.getvalue() == ""


def test_test_counts(console, csv_path):
    console.test_path = str(csv_path)
    console.execute("test 3")
    lines = console.out.getvalue().splitlines()
    counts = next(line for line in lines if line.startswith("Correct: "))
    correct = int(counts.split(",")[0].split()[1])
    incorrect = int(counts.split()[-1])
    assert correct + incorrect == 3
    assert lines[-1].endswith(f"({correct}/3)")


def test_read_lines(console, csv_path):
    console.execute(f"read 5 {csv_path}")
    assert "Processed 5 lines in" in console.out.getvalue()


def test_read_batch(console, csv_path):
    console.execute(f"read-batch 1 {csv_path}")
    assert "Processed 1 batches in" in console.out.getvalue()


def test_read_missing_argument(console):
    console.execute("read")
    assert console.out.getvalue().endswith("Usage: read [no. lines] [optional: path]\n")