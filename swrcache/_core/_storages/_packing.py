from __future__ import annotations

from typing import Any, Mapping, Optional, cast

import msgpack

from swrcache._core._headers import Headers
from swrcache._core.models import Response


def filter_out_swrcache_metadata(data: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if not k.startswith("swrcache_")}


def pack(response: Response) -> bytes:
    return cast(
        bytes,
        msgpack.packb(
            {
                "status_code": response.status_code,
                "headers": response.headers._headers,
                "content": response.content,
                "extra": filter_out_swrcache_metadata(response.metadata),
            }
        ),
    )


def unpack(value: Optional[bytes]) -> Optional[Response]:
    if value is None:
        return None
    data = msgpack.unpackb(value)
    return Response(
        status_code=data["status_code"],
        headers=Headers(data["headers"]),
        content=data["content"],
        metadata=data.get("extra", {}),
    )
