"""
Abstract base class for data converters.

Converters translate between quantized note sequences (muspy.Track) and
the fixed-shape tensors used by MusicVAE-style models. A converter is
configured once and holds no state that changes between calls, so one
instance can serve any number of concurrent encode/decode calls.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import muspy
import tensorflow as tf

from ..configs.converter_config import ConverterType
from ..core.note_sequence import DEFAULT_RESOLUTION, select_track, to_music


class BaseConverter(ABC):
    """
    Abstract base class for data converters.

    Subclasses must implement:
        - encode(): Convert a note sequence to a [num_steps, depth] tensor
        - decode(): Convert a model-shaped tensor back to a muspy.Track
        - depth: Width of the tensor produced by encode()
        - converter_type: ConverterType used by the factory
        - get_state(): Serializable spec for rebuilding the converter
    """

    NUM_SPLITS = 0  # Number of conductor splits
    IS_DRUM = False  # Which track encode_music() picks from a Music

    def __init__(self, num_steps: int, num_segments: Optional[int] = None):
        self._num_steps = num_steps
        self._num_segments = num_segments

    @property
    def num_steps(self) -> int:
        """Total length of sequences in quantized steps."""
        return self._num_steps

    @property
    def num_segments(self) -> Optional[int]:
        """Number of conductor segments, if applicable."""
        return self._num_segments

    @property
    def num_splits(self) -> int:
        return self.NUM_SPLITS

    @property
    @abstractmethod
    def depth(self) -> int:
        """Width of the tensor produced by encode()."""
        pass

    @property
    @abstractmethod
    def converter_type(self) -> ConverterType:
        pass

    @abstractmethod
    def encode(self, sequence: Any) -> tf.Tensor:
        """
        Encode a note sequence to a tensor.

        Args:
            sequence: Object with a `notes` list of muspy.Note (e.g. muspy.Track)

        Returns:
            float32 tf.Tensor of shape [num_steps, depth]
        """
        pass

    @abstractmethod
    def decode(self, tensor: Any) -> muspy.Track:
        """
        Decode a tensor back to a note sequence.

        Args:
            tensor: 2-D tensor in the layout this converter expects

        Returns:
            New muspy.Track with quantized-step timing
        """
        pass

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """
        Get converter state for serialization.

        Returns:
            Spec dictionary {'type': ..., 'args': {...}} accepted by
            converter_from_spec()
        """
        pass

    def encode_batch(self, sequences: Sequence[Any]) -> tf.Tensor:
        """Encode several sequences into a [batch, num_steps, depth] tensor."""
        if len(sequences) == 0:
            raise ValueError("encode_batch requires at least one sequence")
        return tf.stack([self.encode(sequence) for sequence in sequences])

    def decode_batch(self, tensor: Any) -> List[muspy.Track]:
        """Decode a [batch, steps, depth] tensor into one track per item."""
        tensor = tf.convert_to_tensor(tensor)
        if tensor.shape.rank != 3:
            raise ValueError(
                f"decode_batch expects a 3-D tensor, got shape {tensor.shape.as_list()}"
            )
        return [self.decode(item) for item in tf.unstack(tensor)]

    def encode_music(self, music: muspy.Music) -> tf.Tensor:
        """
        Encode the first matching track of a multitrack Music.

        Drum converters take the first drum track, the melody converter
        the first pitched track.
        """
        track = select_track(music, is_drum=self.IS_DRUM)
        if track is None:
            kind = "drum" if self.IS_DRUM else "pitched"
            raise ValueError(f"Music has no {kind} track to encode")
        return self.encode(track)

    def decode_to_music(self, tensor: Any, resolution: int = DEFAULT_RESOLUTION) -> muspy.Music:
        """Decode a tensor and wrap the result in a muspy.Music."""
        return to_music(self.decode(tensor), resolution=resolution)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BaseConverter):
            return NotImplemented
        return self.get_state() == other.get_state()

    def __hash__(self) -> int:
        return hash((self.converter_type, self._num_steps, self._num_segments))
