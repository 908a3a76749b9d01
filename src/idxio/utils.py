"""
Inspection helpers for IDX streams.
"""

import math
from typing import Any, Dict

from .header import decode_header


def get_packet_info(data) -> Dict[str, Any]:
    """Describe an IDX stream from its header without decoding the body.

    Parameters
    ----------
    data : bytes-like
        At least the header bytes of an IDX stream.

    Returns
    -------
    dict
        ``kind``, ``type_code``, ``ndim``, ``shape``, ``header_length``,
        ``num_elements`` and ``body_length`` (bytes the header implies).
    """
    kind, shape, length = decode_header(data)
    num_elements = math.prod(shape)
    return {
        "kind": kind,
        "type_code": kind.code,
        "ndim": len(shape),
        "shape": shape,
        "header_length": length,
        "num_elements": num_elements,
        "body_length": num_elements * kind.width,
    }
