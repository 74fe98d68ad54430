# digitnet

digitnet is a small neural network that learns to recognise handwritten digits
from the MNIST data set. It reads the data in CSV form. Each row holds the
digit and then its 784 pixel values, from 0 to 255. The network has two hidden
layers of 128 and 64 nodes that use leaky ReLU, and an output layer of 10 nodes
that uses softmax. It trains with mini-batch gradient descent on batches of 32
images.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## The console

Start the interactive console with:

```
digitnet
```

It reads commands from standard input until `exit` or the end of input. The
console expects the MNIST CSV files at `./data/mnistdata/mnist_train.csv` and
`./data/mnistdata/mnist_test.csv`, relative to the directory you start it from.
It accepts these commands:

| Command | What it does |
| --- | --- |
| `help` | Lists the commands. |
| `train [epochs]` | Trains for the given number of epochs. One epoch is 60000 rows. The default is 1. |
| `trainb [batches]` | Trains on the given number of batches of 32 images. The default is 1. |
| `test [iterations]` | Classifies the given number of test rows, then reports the counts and the accuracy. The default is 1. |
| `lr <rate>` | Sets the learning rate. The default is 0.001. |
| `save <path>` | Writes the weights and biases to a text file, one matrix per line. |
| `load <path>` | Reads weights and biases back from a saved file. It reports every matrix whose line held too few values. |
| `id <path> [digit]` | Identifies the digit in a file of pixel values, printing each class probability. If you give the correct digit, it also prints the cross-entropy loss. |
| `read <lines> [path]` | Times how long it takes to read and parse the given number of rows. |
| `read-batch <batches> [path]` | Times how long it takes to read the given number of batches. |
| `exit` | Leaves the console. |

Training and testing continue from the row where the previous run stopped, and
wrap around at the end of the data. Unknown commands are ignored. Bad numbers,
missing files and rows beyond the end of a file print an `Error:` line and the
console carries on.

## Using it from Python

```python
from digitnet.network import NeuralNetwork

network = NeuralNetwork()
network.train(100, "data/mnistdata/mnist_train.csv", False)
result = network.test(500, "data/mnistdata/mnist_test.csv", False)
print(result.correct, result.incorrect, result.accuracy())

network.save_model("model.txt")
for message in network.load_model("model.txt"):
    print(message)
```

`NeuralNetwork.get_outputs` takes raw pixel values, either as a flat sequence
of images one after another or as one row of 784 values per image. It returns
one row of 10 probabilities per image. Pass `True` as the last argument of
`train` or `test` to start again from the first row of the file. The learning
rate is the `learning_rate` attribute.

The console can be driven from Python too. Give it a network, a stream to
write to, and the lines to execute:

```python
import sys

from digitnet.commands import Console
from digitnet.network import NeuralNetwork

console = Console(NeuralNetwork(), sys.stdout)
console.run(["lr 0.01", "trainb 10", "test 100"])
```

`Console.train_path` and `Console.test_path` hold the CSV paths the console
trains and tests on.

The lower-level modules are also available:

- `digitnet.dataparser` parses CSV rows and pixel files into `ImageData`
  (`parse_csv_row`, `get_row_data`, `get_batched_training_data`,
  `parse_input_file`) and renders an image as text with `format_data`.
- `digitnet.matrix` provides the `Matrix` type that holds the weights and
  biases.
- `digitnet.utility` provides the network dimensions, the seeded random
  numbers, the activation functions (`sigmoid`, `relu`, `leaky_relu`, `tanh`),
  the loss functions (`categorical_cross_entropy`, `mean_squared_error`), the
  one-hot targets and `LineReader`, which remembers where lines start so that
  later reads of the same file seek straight to them.

## What it does not do

digitnet does not download the MNIST data. You supply the CSV files yourself.
The layer sizes and the batch size are fixed. There is no command-line option
to point the console at other data files.