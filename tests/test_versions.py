"""
Tests for version-aware tag filtering and ordering.
"""

import pytest

from vcsupdate.versions import (
    compare_versions,
    is_version_newer,
    looks_like_version,
    sort_tags_by_version,
)


class TestLooksLikeVersion:

    @pytest.mark.parametrize("name", [
        "1", "1.2", "1.2.3", "v1.2.3", "2.0-beta1", "3.1rc2",
        "1.2.3.4.5", "10.0.0+build7", "v0.9",
    ])
    def test_accepts(self, name):
        assert looks_like_version(name)

    @pytest.mark.parametrize("name", [
        "release-notes", "latest", "", "v", "beta-1.0", "stable", None,
    ])
    def test_rejects(self, name):
        assert not looks_like_version(name)


class TestCompareVersions:

    def test_numeric_segments(self):
        assert compare_versions("1.10.0", "1.2.0") == 1
        assert compare_versions("1.9.0", "1.10.0") == -1

    def test_prefix_ignored(self):
        assert compare_versions("v2.0.0", "2.0.0") == 0

    def test_prerelease_sorts_below_release(self):
        assert compare_versions("2.0.0", "2.0.0-beta1") == 1

    def test_non_pep440_falls_back_to_segments(self):
        # "1.2.3.x" is not PEP 440, numeric parts still compare numerically
        assert compare_versions("1.10.x", "1.9.x") == 1

    def test_missing_segments_are_zero(self):
        assert compare_versions("1.0", "1.0.0") == 0


class TestSortTagsByVersion:

    def test_picks_highest_numerically(self):
        tags = ["v1.2.0", "v1.10.0", "v1.9.0", "release-notes"]
        assert sort_tags_by_version(tags) == ["v1.10.0", "v1.9.0", "v1.2.0"]

    def test_provider_objects(self):
        tags = [{"name": "1.0"}, {"name": "docs"}, {"name": "2.0"}, {"other": "3.0"}]
        result = sort_tags_by_version(tags)
        assert [t["name"] for t in result] == ["2.0", "1.0"]

    def test_custom_name_key(self):
        tags = [{"tag": "0.1"}, {"tag": "0.2"}]
        assert sort_tags_by_version(tags, name_key="tag")[0] == {"tag": "0.2"}

    def test_empty(self):
        assert sort_tags_by_version([]) == []
        assert sort_tags_by_version(["nightly"]) == []

    def test_does_not_mutate_input(self):
        tags = ["1.0", "2.0"]
        sort_tags_by_version(tags)
        assert tags == ["1.0", "2.0"]


class TestIsVersionNewer:

    def test_newer(self):
        assert is_version_newer("1.2.0", "1.10.0")
        assert is_version_newer("v1.0", "1.0.1")

    def test_not_newer(self):
        assert not is_version_newer("2.0.0", "1.9.9")
        assert not is_version_newer("1.0.0", "1.0.0")

    def test_empty_candidate_never_newer(self):
        assert not is_version_newer("1.0.0", "")
        assert not is_version_newer("1.0.0", "master")

    def test_unknown_current_loses(self):
        assert is_version_newer("", "0.1")
        assert is_version_newer("dev", "0.1")
