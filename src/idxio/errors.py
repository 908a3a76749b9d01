"""
Exceptions raised by idxio.
"""


class IdxError(ValueError):
    """Base class for IDX encode/decode failures."""


class UnsupportedType(IdxError):
    """Element kind, dtype or wire code outside float32/int32/uint8."""


class NoData(IdxError, EOFError):
    """Input ended before any header was parsed."""


class TruncatedHeader(IdxError, EOFError):
    """Input is shorter than the header it declares."""


class DecoderStateError(IdxError):
    """Operation not allowed in the decoder's current state."""


class TensorTooLarge(IdxError):
    """Header declares more elements than the decoder will allocate."""
