"""Tests for stream root prefix resolution (core/depot_prefix.py).

Coverage:
* ``depot_prefix`` for several depths.
* Rejection of non-depot and too-shallow paths.
* ``DepotPrefixResolver`` lazy caching and stripping.
"""

from __future__ import annotations

import pytest

from depotscan.core.depot_prefix import DepotPrefixResolver, depot_prefix
from depotscan.exceptions import DepotPrefixError, ProtocolError


# ---------------------------------------------------------------------------
# depot_prefix
# ---------------------------------------------------------------------------

class TestDepotPrefix:
    @pytest.mark.parametrize(
        ("depth", "expected"),
        [
            (1, "//depot/"),
            (2, "//depot/main/"),
            (3, "//depot/main/Engine/"),
        ],
    )
    def test_depths(self, depth: int, expected: str) -> None:
        assert depot_prefix("//depot/main/Engine/foo.cpp", depth) == expected

    def test_colon_suffix_does_not_matter(self) -> None:
        assert depot_prefix("//a/b/c/d:foo", 2) == "//a/b/"

    def test_missing_root_marker(self) -> None:
        with pytest.raises(DepotPrefixError, match='does not begin with "//"'):
            depot_prefix("depot/main/foo.cpp", 1)

    def test_error_is_protocol_error(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            depot_prefix("/depot/main", 1)
        assert exc_info.value.line == "/depot/main"

    def test_path_shallower_than_depth(self) -> None:
        with pytest.raises(DepotPrefixError, match="shallower than stream depth 3"):
            depot_prefix("//depot/main", 3)


# ---------------------------------------------------------------------------
# DepotPrefixResolver
# ---------------------------------------------------------------------------

class TestDepotPrefixResolver:
    def test_prefix_unset_before_first_path(self) -> None:
        assert DepotPrefixResolver(2).prefix is None

    def test_strips_stream_root(self) -> None:
        resolver = DepotPrefixResolver(2)
        assert resolver.strip("//depot/main/Engine/foo.cpp") == "Engine/foo.cpp"
        assert resolver.prefix == "//depot/main/"

    def test_prefix_computed_once(self) -> None:
        resolver = DepotPrefixResolver(2)
        resolver.strip("//depot/main/a.cpp")
        assert resolver.strip("//depot/main/sub/b.cpp") == "sub/b.cpp"
        assert resolver.prefix == "//depot/main/"

    def test_foreign_path_left_unchanged(self) -> None:
        resolver = DepotPrefixResolver(2)
        resolver.strip("//depot/main/a.cpp")
        assert resolver.strip("//other/dev/b.cpp") == "//other/dev/b.cpp"

    def test_later_paths_are_not_validated(self) -> None:
        resolver = DepotPrefixResolver(1)
        resolver.strip("//depot/a.cpp")
        assert resolver.strip("not-a-depot-path") == "not-a-depot-path"
