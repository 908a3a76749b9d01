"""
FastAPI Integration for idxio.
"""

from typing import Any, Optional, Sequence

from fastapi import HTTPException, Request
from fastapi.responses import StreamingResponse

from .config import DEFAULT_BATCH_SIZE
from .core import KindLike, loads
from .encoder import iter_dumps, prepare
from .errors import IdxError
from .tensor import IdxTensor


class IdxResponse(StreamingResponse):
    """FastAPI Response class streaming a tensor in IDX format."""

    def __init__(
        self,
        data: Any,
        shape: Optional[Sequence[int]] = None,
        kind: KindLike = None,
        filename: str = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        **kwargs,
    ):
        """
        Initialize the IdxResponse.

        Parameters
        ----------
        data : array_like
            The elements to stream.
        shape : sequence of int, optional
            Declared shape. Defaults to ``data.shape``.
        kind : ElementKind, str or int, optional
            Element kind. Inferred from ``data.dtype`` when omitted.
        filename : str, optional
            Filename for the response.
        batch_size : int, default 1024
            Elements per streamed batch.
        **kwargs
            Additional arguments passed to StreamingResponse.
        """
        flat, shape, kind = prepare(data, shape, kind)
        stream = iter_dumps(flat, shape=shape, kind=kind, batch_size=batch_size)
        super().__init__(stream, media_type="application/octet-stream", **kwargs)
        self.headers["X-Idx-Shape"] = ",".join(str(d) for d in shape)
        self.headers["X-Idx-Dtype"] = kind.value
        if filename:
            self.headers["Content-Disposition"] = f'attachment; filename="{filename}"'


async def get_idx_data(request: Request) -> IdxTensor:
    """Dependency to extract an IDX tensor from an incoming FastAPI Request.

    Parameters
    ----------
    request : Request
        The FastAPI request object.

    Returns
    -------
    IdxTensor
        The deserialized tensor.

    Raises
    ------
    HTTPException
        If content type is wrong or the body is not a valid IDX stream.
    """
    if request.headers.get("content-type") != "application/octet-stream":
        raise HTTPException(
            status_code=400, detail="Expected application/octet-stream content type."
        )
    body = await request.body()
    try:
        return loads(body)
    except IdxError as e:
        raise HTTPException(status_code=422, detail=f"Invalid IDX data: {e}")
