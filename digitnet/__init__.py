"""A small neural network for classifying handwritten MNIST digits, with an interactive console."""

__version__ = "0.1.0"