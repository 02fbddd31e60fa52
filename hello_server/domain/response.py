"""The fixed response written to every accepted connection."""

from dataclasses import dataclass, field

STATUS_LINE = "HTTP/1.1 200 OK"
CONTENT_TYPE = "text/plain"
BODY = b"Hello, World!"
CRLF = "\r\n"


@dataclass(frozen=True)
class HttpResponse:
    """Represents an HTTP-shaped response serialized verbatim onto the wire."""

    status_line: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    def to_bytes(self) -> bytes:
        """Serialize the response, deriving Content-Length from the body."""
        headers = {
            name: value
            for name, value in self.headers.items()
            if name.lower() != "content-length"
        }
        headers["Content-Length"] = str(len(self.body))
        header_lines = [self.status_line]
        header_lines.extend(f"{name}: {value}" for name, value in headers.items())
        header_block = CRLF.join(header_lines) + CRLF + CRLF
        return header_block.encode("latin-1") + self.body


def build_fixed_response(body: bytes = BODY) -> HttpResponse:
    """Return the canned 200 response carrying ``body`` as text/plain."""
    return HttpResponse(STATUS_LINE, body, {"Content-Type": CONTENT_TYPE})


FIXED_RESPONSE = build_fixed_response().to_bytes()
