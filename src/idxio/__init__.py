from .config import ElementKind, code_of, kind_of, width_of
from .core import dump, dumps, load, load_file, loads, read_stream, save, write_stream
from .decoder import DecoderState, StreamDecoder
from .encoder import iter_batches, iter_dumps
from .errors import (
    DecoderStateError,
    IdxError,
    NoData,
    TensorTooLarge,
    TruncatedHeader,
    UnsupportedType,
)
from .header import decode_header, encode_header
from .tensor import IdxTensor
from .utils import get_packet_info

__all__ = [
    "dumps", "loads", "dump", "load", "read_stream", "write_stream", "save", "load_file",
    "iter_dumps", "iter_batches", "encode_header", "decode_header", "get_packet_info",
    "StreamDecoder", "DecoderState", "IdxTensor", "ElementKind", "code_of", "kind_of",
    "width_of", "IdxError", "UnsupportedType", "NoData", "TruncatedHeader",
    "DecoderStateError", "TensorTooLarge",
]
