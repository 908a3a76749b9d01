"""
In-memory representation of a decoded IDX tensor.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import ElementKind


@dataclass(frozen=True, eq=False)
class IdxTensor:
    """A flat element buffer plus the shape and kind read from its header.

    ``len(data)`` always equals ``prod(shape)``: the buffer is sized by the
    header, not by the number of bytes that followed it.
    """

    data: np.ndarray
    shape: Tuple[int, ...]
    type: ElementKind

    @property
    def num_elements(self) -> int:
        return int(self.data.size)

    def to_array(self) -> np.ndarray:
        """Return ``data`` reshaped to ``shape`` (a view, no copy)."""
        return self.data.reshape(self.shape)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdxTensor):
            return NotImplemented
        if self.shape != other.shape or self.type is not other.type:
            return False
        # float32 compares by bit pattern so NaN payloads and -0.0 round-trip
        return self.data.tobytes() == other.data.tobytes()

    def __repr__(self) -> str:
        return f"IdxTensor(shape={self.shape}, type={self.type.value})"
