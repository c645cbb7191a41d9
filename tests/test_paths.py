"""
Property Test: Path Allow-Lists

A path is accepted for a verb iff it opens with one of that verb's
allowed patterns.
"""

import re

import pytest
from hypothesis import given, strategies as st

from amee_api import (
    DEFAULT_ALLOW_LIST,
    PathAllowList,
    PathValidationError,
    ProtocolError,
    is_valid_path,
    validate_path,
)


HEX_UPPER = "0123456789ABCDEF"

profile_uids = st.text(alphabet=HEX_UPPER, min_size=12, max_size=12)
path_tails = st.text(alphabet="abcxyzABCXYZ0189/-_?=&.", max_size=30)
verbs = st.sampled_from(["post", "put", "get", "delete"])


class TestExamples:
    """Known good and bad paths per verb."""

    def test_put_profile_item(self):
        assert validate_path("/profiles/ABCDEF012345/categories", "put") is True

    def test_put_other_path(self):
        with pytest.raises(PathValidationError) as exc_info:
            validate_path("/other", "put")
        assert str(exc_info.value) == "Invalid AMEE REST API PUT path specified: /other"
        assert exc_info.value.path == "/other"
        assert exc_info.value.verb == "PUT"

    @pytest.mark.parametrize(
        "path, verb",
        [
            ("/auth", "post"),
            ("/profiles", "get"),
            ("/profiles/ABCDEF012345/home/energy", "get"),
            ("/data/home/energy/quantity", "get"),
            ("/data", "GET"),
            ("/profiles/0123456789AB/", "delete"),
        ],
    )
    def test_allowed(self, path: str, verb: str):
        assert is_valid_path(path, verb)

    @pytest.mark.parametrize(
        "path, verb",
        [
            ("/profiles", "post"),
            ("/data", "post"),
            ("/auth", "get"),
            ("/profiles/ABCDEF01234/", "put"),
            ("/profiles/abcdef012345/", "put"),
            ("/profiles/ABCDEF012345", "delete"),
            ("profiles", "get"),
            ("", "get"),
        ],
    )
    def test_rejected(self, path: str, verb: str):
        with pytest.raises(PathValidationError):
            validate_path(path, verb)

    @pytest.mark.parametrize(
        "path",
        [
            "/profiles\nX-Injected: 1",
            "/data\r\nHost: evil.example",
            "/profiles/ABCDEF012345/\n",
        ],
    )
    def test_line_breaks_rejected(self, path: str):
        with pytest.raises(PathValidationError):
            validate_path(path, "get")

    def test_unknown_verb_checked_before_path(self):
        with pytest.raises(ProtocolError):
            validate_path("/profiles\n", "patch")

    def test_unknown_verb(self):
        with pytest.raises(ProtocolError):
            validate_path("/profiles", "patch")

    def test_custom_allow_list(self):
        allow_list = PathAllowList(get=("/transports",))
        assert is_valid_path("/transports/ABC", "get", allow_list)
        assert not is_valid_path("/profiles", "get", allow_list)


class TestProperties:
    """Generated paths against the default allow-list."""

    @given(uid=profile_uids, tail=path_tails)
    def test_profile_item_paths_allowed_for_writes(self, uid: str, tail: str):
        path = f"/profiles/{uid}/{tail}"
        assert is_valid_path(path, "put")
        assert is_valid_path(path, "delete")
        assert is_valid_path(path, "get")

    @given(tail=path_tails)
    def test_get_prefixes(self, tail: str):
        assert is_valid_path("/profiles" + tail, "get")
        assert is_valid_path("/data" + tail, "get")

    @given(path=st.text(max_size=40), verb=verbs)
    def test_accepts_iff_an_opening_matches(self, path: str, verb: str):
        openings = DEFAULT_ALLOW_LIST.patterns_for(verb)
        expected = "\r" not in path and "\n" not in path and any(
            re.match(opening, path) for opening in openings
        )
        assert is_valid_path(path, verb) == expected

    @given(path=st.text(max_size=40).filter(lambda p: not p.startswith("/auth")))
    def test_post_only_auth(self, path: str):
        with pytest.raises(PathValidationError):
            validate_path(path, "post")

    @given(verb=verbs)
    def test_verb_case_insensitive(self, verb: str):
        assert is_valid_path("/profiles/ABCDEF012345/", verb.upper()) == is_valid_path(
            "/profiles/ABCDEF012345/", verb
        )
