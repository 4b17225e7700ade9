"""
TensorFlow helpers shared by the converters.

Decoding reads model output back to the host exactly once per call.
`fetched` scopes that read.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import numpy as np
import tensorflow as tf


def as_matrix(tensor: Any, widths: Sequence[int], name: str = "tensor") -> tf.Tensor:
    """
    Convert input to a rank-2 tensor and check its width.

    Args:
        tensor: tf.Tensor, numpy array or nested lists
        widths: Accepted sizes of the last dimension
        name: Name used in error messages

    Returns:
        tf.Tensor of rank 2

    Raises:
        ValueError: If the rank or width does not match
    """
    tensor = tf.convert_to_tensor(tensor)
    if tensor.shape.rank != 2:
        raise ValueError(
            f"{name} must be 2-D [steps, depth], got shape {tensor.shape.as_list()}"
        )
    if tensor.shape[1] not in widths:
        expected = " or ".join(str(w) for w in widths)
        raise ValueError(
            f"{name} must have depth {expected}, got shape {tensor.shape.as_list()}"
        )
    return tensor


@contextmanager
def fetched(tensor: tf.Tensor) -> Iterator[np.ndarray]:
    """
    Scope the single blocking device-to-host read of a tensor.

    Callers pass intermediate tensors (arg-max, slices) straight in, so
    the generator frame holds the only reference and it goes away when
    the block exits.
    """
    yield tensor.numpy()


def argmax_labels(tensor: tf.Tensor) -> np.ndarray:
    """Arg-max every row of a [steps, depth] tensor into int32 labels."""
    with fetched(tf.argmax(tensor, axis=1, output_type=tf.int32)) as values:
        return values.astype(np.int32)


def one_hot(labels: np.ndarray, depth: int) -> tf.Tensor:
    """One-hot expand per-step labels into a float32 [steps, depth] tensor."""
    return tf.one_hot(tf.convert_to_tensor(labels, dtype=tf.int32), depth, dtype=tf.float32)
