"""
AMEE API Wire Format

Builds the minimal line-oriented request the AMEE REST API accepts and
splits the raw response into lines and JSON payload lines.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

import httpx


METHODS = ("GET", "POST", "PUT", "DELETE")

AUTH_PATH = "/auth"
UNAUTHORIZED_MARKER = "401 UNAUTH"

AUTH_TOKEN_HEADER = re.compile(r"^authToken: (.+)")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _form_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "1" if value else "0"
    return value


def encode_params(params: Optional[Mapping[str, Any]]) -> str:
    """
    Form-encode parameters the way the AMEE REST API expects.

    Booleans become 1/0, None values are left out and sequences become
    repeated keys.
    """
    if not params:
        return ""
    items = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            items.extend((key, _form_value(v)) for v in value if v is not None)
        else:
            items.append((key, _form_value(value)))
    return str(httpx.QueryParams(items))


def is_auth_call(method: str, path: str) -> bool:
    """Check if the request is the POST /auth handshake."""
    return method == "POST" and path == AUTH_PATH


def build_request(
    method: str,
    path: str,
    host: str,
    token: Optional[str] = None,
    body: Optional[str] = None,
) -> bytes:
    """
    Build the raw request bytes.

    The Cookie line is only sent when a token is given; the auth call
    goes out without one.
    """
    lines = [
        f"{method} {path} HTTP/1.1\n",
        "Accept: application/json\n",
    ]
    if token is not None:
        lines.append(f"Cookie: authToken={token}\n")
    lines.append(f"Host: {host}\n")

    if body:
        encoded = body.encode("utf-8")
        lines.append(f"Content-Type: {FORM_CONTENT_TYPE}\n")
        lines.append(f"Content-Length: {len(encoded)}\n")
        lines.append("\n")
        return "".join(lines).encode("utf-8") + encoded

    lines.append("\n\n")
    return "".join(lines).encode("utf-8")


@dataclass
class ApiResponse:
    """Raw response split into lines."""

    lines: List[str] = field(default_factory=list)
    json_lines: List[str] = field(default_factory=list)

    @property
    def status_line(self) -> str:
        return self.lines[0] if self.lines else ""

    @property
    def is_unauthorized(self) -> bool:
        return UNAUTHORIZED_MARKER in self.status_line

    @property
    def payload(self) -> str:
        """First JSON payload line, or an empty string."""
        return self.json_lines[0] if self.json_lines else ""


def parse_response(raw: bytes) -> ApiResponse:
    """Split a raw response into lines and collect the JSON payload lines."""
    response = ApiResponse()
    text = raw.decode("utf-8", errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
    if not text:
        return response
    for line in text.split("\n"):
        line = line.rstrip("\r")
        response.lines.append(line)
        if line.startswith("{"):
            response.json_lines.append(line)
    return response


def find_auth_token(lines: List[str]) -> Optional[str]:
    """Return the value of the first authToken header line."""
    for line in lines:
        match = AUTH_TOKEN_HEADER.match(line)
        if match:
            return match.group(1).strip()
    return None
