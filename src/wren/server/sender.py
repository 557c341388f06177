"""ASGI response sending: translates a finished Response to ASGI messages."""

from wren._internal.asgi import Send
from wren.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI ``send()`` calls.

    A ``Content-Length`` set by the writer is kept as-is (HEAD responses
    advertise the length of the body they suppressed); otherwise it is
    computed from the body.
    """
    body = response.body if _body_allowed(response.status) else b""

    raw_headers: list[tuple[bytes, bytes]] = []
    has_length = False
    for name, value in response.headers:
        lowered = name.lower()
        if lowered == "content-length":
            if not _body_allowed(response.status):
                continue
            has_length = True
        raw_headers.append((lowered.encode("latin-1"), str(value).encode("latin-1")))
    raw_headers.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )
    if not has_length:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
