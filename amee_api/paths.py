"""
AMEE API Path Allow-Lists

Each verb may only be sent to paths that open with one of its patterns.
Patterns are regular expressions anchored at the start of the path only.
"""

import re
from dataclasses import dataclass
from typing import Dict, Pattern, Tuple

from .errors import PathValidationError, ProtocolError


PROFILE_ITEM_OPENING = r"/profiles/[A-F0-9]{12}/"


@dataclass(frozen=True)
class PathAllowList:
    """Permitted path openings per HTTP verb."""

    post: Tuple[str, ...] = ("/auth",)
    put: Tuple[str, ...] = (PROFILE_ITEM_OPENING,)
    get: Tuple[str, ...] = ("/profiles", "/data")
    delete: Tuple[str, ...] = (PROFILE_ITEM_OPENING,)

    def patterns_for(self, verb: str) -> Tuple[str, ...]:
        """Return the openings for a verb (case-insensitive)."""
        key = verb.lower()
        if key not in ("post", "put", "get", "delete"):
            raise ProtocolError(f"Invalid AMEE REST API method specified: {verb}")
        return getattr(self, key)


DEFAULT_ALLOW_LIST = PathAllowList()

_compiled: Dict[Tuple[str, ...], Pattern[str]] = {}


def _opening_regex(patterns: Tuple[str, ...]) -> Pattern[str]:
    regex = _compiled.get(patterns)
    if regex is None:
        regex = re.compile("^(" + "|".join(patterns) + ")")
        _compiled[patterns] = regex
    return regex


def is_valid_path(path: str, verb: str, allow_list: PathAllowList = DEFAULT_ALLOW_LIST) -> bool:
    """Check whether path opens with one of the verb's allowed patterns."""
    regex = _opening_regex(allow_list.patterns_for(verb))
    # line breaks would end the request line
    if "\r" in path or "\n" in path:
        return False
    return regex.match(path) is not None


def validate_path(path: str, verb: str, allow_list: PathAllowList = DEFAULT_ALLOW_LIST) -> bool:
    """
    Validate a request path for a verb.

    Args:
        path: Request path, without query string
        verb: One of post, put, get, delete (any case)
        allow_list: Allowed openings, defaults to the AMEE REST API ones

    Returns:
        True if the path is allowed

    Raises:
        PathValidationError: If no opening matches or the path holds a line break
        ProtocolError: If the verb is unknown
    """
    if not is_valid_path(path, verb, allow_list):
        raise PathValidationError(path, verb)
    return True
