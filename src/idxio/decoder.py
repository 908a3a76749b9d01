"""
Incremental IDX decoder.

Bytes arrive in chunks whose boundaries need not match header or element
boundaries. :class:`StreamDecoder` is fed each chunk in order and produces the
finished tensor once the input has ended.
"""

import logging
import math
from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np

from .config import MAX_ELEMENTS, ElementKind
from .errors import (
    DecoderStateError,
    IdxError,
    NoData,
    TensorTooLarge,
    TruncatedHeader,
)
from .header import decode_header
from .tensor import IdxTensor

logger = logging.getLogger(__name__)

Chunk = Union[bytes, bytearray, memoryview, np.ndarray]


class DecoderState(Enum):
    AWAITING_HEADER = "awaiting_header"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class StreamDecoder:
    """
    State machine turning an ordered sequence of byte chunks into an
    :class:`IdxTensor`.

    Parameters
    ----------
    carry_partial : bool, default True
        Keep an incomplete header or element at the end of a chunk and finish
        it with the next chunk. With ``False`` the decoder reproduces the
        legacy reader: the first non-empty chunk must hold the whole header,
        and bytes of an element cut by a chunk boundary are dropped (counted in
        :attr:`dropped_bytes`).

    Notes
    -----
    The output buffer is sized from the header alone. Missing trailing
    elements stay zero and surplus elements are discarded.
    """

    def __init__(self, carry_partial: bool = True):
        self.carry_partial = carry_partial
        self.state = DecoderState.AWAITING_HEADER
        self.kind: Optional[ElementKind] = None
        self.shape: Optional[Tuple[int, ...]] = None
        self.dropped_bytes = 0
        self._data: Optional[np.ndarray] = None
        self._index = 0
        self._pending = bytearray()
        self._error: Optional[IdxError] = None
        self._result: Optional[IdxTensor] = None

    @property
    def elements_decoded(self) -> int:
        """Whole elements decoded so far, including any past the buffer end."""
        return self._index

    @property
    def pending_bytes(self) -> int:
        """Bytes held back waiting for the rest of a header or element."""
        return len(self._pending)

    def feed(self, chunk: Chunk) -> None:
        """Consume the next chunk of input.

        Raises
        ------
        DecoderStateError
            If the decoder already completed.
        TruncatedHeader
            In legacy mode, if the first chunk is shorter than the header.
        UnsupportedType
            If the header carries an unknown type code.
        TensorTooLarge
            If the header declares more than ``MAX_ELEMENTS`` elements.
        """
        if self.state is DecoderState.COMPLETE:
            raise DecoderStateError("Decoder already completed")
        if self.state is DecoderState.FAILED:
            raise self._error

        view = memoryview(chunk).cast("B")
        if len(view) == 0:
            return

        if self.state is DecoderState.AWAITING_HEADER:
            view = self._parse_header(view)
            if view is None:
                return
        self._decode(view)

    def finish(self) -> IdxTensor:
        """Signal end of input and return the assembled tensor.

        Raises
        ------
        NoData
            If no bytes were ever fed.
        TruncatedHeader
            If input ended partway through the header.
        """
        if self.state is DecoderState.COMPLETE:
            return self._result
        if self.state is DecoderState.FAILED:
            raise self._error

        if self.state is DecoderState.AWAITING_HEADER:
            if self._pending:
                raise self._fail(
                    TruncatedHeader(
                        f"Input ended after {len(self._pending)} header bytes"
                    )
                )
            raise self._fail(NoData("No data found"))

        if self._pending:
            logger.debug(
                "Dropping %d bytes of a trailing partial element", len(self._pending)
            )
            self.dropped_bytes += len(self._pending)
            self._pending = bytearray()

        self._result = IdxTensor(data=self._data, shape=self.shape, type=self.kind)
        self.state = DecoderState.COMPLETE
        logger.debug(
            "Decoded %s tensor shape=%s (%d elements, %d dropped bytes)",
            self.kind.value,
            self.shape,
            self._index,
            self.dropped_bytes,
        )
        return self._result

    # --- internals ---

    def _fail(self, error: IdxError) -> IdxError:
        self.state = DecoderState.FAILED
        self._error = error
        self._data = None
        self._pending = bytearray()
        return error

    def _parse_header(self, view: memoryview) -> Optional[memoryview]:
        """Parse the header, returning the bytes that follow it."""
        buf = bytes(self._pending) + bytes(view) if self._pending else view
        try:
            kind, shape, length = decode_header(buf)
        except TruncatedHeader as e:
            if not self.carry_partial:
                raise self._fail(e)
            self._pending = bytearray(buf)
            return None
        except IdxError as e:
            raise self._fail(e)

        num_elements = math.prod(shape)
        if num_elements > MAX_ELEMENTS:
            raise self._fail(
                TensorTooLarge(
                    f"Header exceeds maximum elements ({num_elements} > {MAX_ELEMENTS})"
                )
            )
        try:
            data = np.zeros(num_elements, dtype=kind.dtype)
        except MemoryError:
            raise self._fail(
                TensorTooLarge(f"Cannot allocate {num_elements} {kind.value} elements")
            ) from None

        self.kind = kind
        self.shape = shape
        self._data = data
        self._pending = bytearray()
        self.state = DecoderState.STREAMING
        logger.debug(
            "Parsed header: %s shape=%s (%d header bytes)", kind.value, shape, length
        )
        return memoryview(buf)[length:]

    def _decode(self, view: memoryview) -> None:
        width = self.kind.width
        if self._pending:
            take = min(width - len(self._pending), len(view))
            self._pending += view[:take]
            view = view[take:]
            if len(self._pending) < width:
                return
            self._store(bytes(self._pending))
            self._pending = bytearray()

        whole = (len(view) // width) * width
        if whole:
            self._store(view[:whole])
        rest = len(view) - whole
        if not rest:
            return
        if self.carry_partial:
            self._pending = bytearray(view[whole:])
        else:
            self.dropped_bytes += rest
            logger.debug("Dropping %d bytes of a partial element", rest)

    def _store(self, buf: Union[bytes, memoryview]) -> None:
        count = len(buf) // self.kind.width
        room = len(self._data) - self._index
        take = min(count, room)
        if take > 0:
            self._data[self._index : self._index + take] = np.frombuffer(
                buf, dtype=self.kind.wire_dtype, count=take
            )
        self._index += count
