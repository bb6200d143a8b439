"""
Tests for repository identity parsing.

Tests cover:
- GitLab nested group namespaces
- owner/repo grammar for GitHub and Bitbucket
- SSH remotes, .git suffixes, trailing slashes, short forms
- InvalidRepositoryUrlError for malformed URLs
"""

import pytest

from vcsupdate.errors import InvalidRepositoryUrlError
from vcsupdate.identity import (
    RepositoryIdentity,
    parse_gitlab_url,
    parse_repository_url,
)


class TestGitLabIdentity:
    """GitLab allows group/subgroup/.../project paths."""

    @pytest.mark.parametrize("url, namespace", [
        ("https://gitlab.com/group/project", "group/project"),
        ("https://gitlab.com/group/sub/repo", "group/sub/repo"),
        ("https://gitlab.com/group/sub/repo/", "group/sub/repo"),
        ("https://gitlab.com/a/b/c/d", "a/b/c/d"),
        ("https://gitlab.com/group/project.git", "group/project"),
        ("git@gitlab.com:group/sub/project.git", "group/sub/project"),
        ("ssh://git@gitlab.example.com:2222/group/project.git", "group/project"),
        ("https://gitlab.com/group/project/-/tree/main", "group/project"),
        ("https://gitlab.com/group/sub/project/-/merge_requests/1", "group/sub/project"),
        ("group/project", "group/project"),
    ])
    def test_namespace(self, url, namespace):
        assert parse_gitlab_url(url).namespace == namespace

    def test_host_and_scheme_kept(self):
        identity = parse_gitlab_url("http://git.example.org/team/tool")
        assert identity.host == "git.example.org"
        assert identity.scheme == "http"

    def test_short_form_has_no_host(self):
        identity = parse_gitlab_url("group/project")
        assert identity.host is None
        assert identity.scheme == "https"

    @pytest.mark.parametrize("url", [
        "https://gitlab.com/group",
        "https://gitlab.com/",
        "https://gitlab.com",
        "",
        "   ",
    ])
    def test_missing_segment_fails(self, url):
        with pytest.raises(InvalidRepositoryUrlError) as exc_info:
            parse_gitlab_url(url)
        assert exc_info.value.provider == "GitLab"

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_gitlab_url("https://gitlab.com/only-one")


class TestOwnerRepoIdentity:
    """GitHub and Bitbucket paths are exactly owner/name."""

    @pytest.mark.parametrize("url, namespace", [
        ("https://github.com/owner/repo", "owner/repo"),
        ("https://github.com/owner/repo/", "owner/repo"),
        ("https://github.com/owner/repo.git", "owner/repo"),
        ("git@github.com:owner/repo.git", "owner/repo"),
        ("ssh://git@github.example.com:2222/owner/repo.git", "owner/repo"),
        ("owner/repo", "owner/repo"),
        ("https://bitbucket.org/team/plugin", "team/plugin"),
    ])
    def test_namespace(self, url, namespace):
        assert parse_repository_url(url).namespace == namespace

    @pytest.mark.parametrize("url", [
        "https://github.com/owner",
        "https://github.com/owner/repo/tree/main",
        "https://github.com/group/sub/repo",
    ])
    def test_invalid(self, url):
        with pytest.raises(InvalidRepositoryUrlError) as exc_info:
            parse_repository_url(url, provider="GitHub")
        assert exc_info.value.url == url
        assert "GitHub" in str(exc_info.value)


class TestRepositoryIdentity:

    def test_str_is_namespace(self):
        assert str(RepositoryIdentity(namespace="group/sub/project")) == "group/sub/project"

    def test_netloc(self):
        assert RepositoryIdentity(namespace="a/b").netloc is None
        assert RepositoryIdentity(namespace="a/b", host="h.example").netloc == "h.example"
        assert RepositoryIdentity(namespace="a/b", host="h.example", port=8443).netloc == "h.example:8443"

    def test_is_immutable(self):
        identity = RepositoryIdentity(namespace="a/b")
        with pytest.raises(AttributeError):
            identity.namespace = "c/d"


class TestPorts:
    """Web ports are kept; SSH ports are not."""

    def test_https_port_kept(self):
        identity = parse_gitlab_url("https://gitlab.example.com:8443/g/p")
        assert identity.host == "gitlab.example.com"
        assert identity.port == 8443
        assert identity.netloc == "gitlab.example.com:8443"

    def test_ssh_port_dropped(self):
        identity = parse_gitlab_url("ssh://git@gitlab.example.com:2222/group/project.git")
        assert identity.namespace == "group/project"
        assert identity.host == "gitlab.example.com"
        assert identity.scheme == "https"
        assert identity.port is None

    def test_scp_remote(self):
        identity = parse_repository_url("git@github.example.com:owner/repo.git")
        assert identity.host == "github.example.com"
        assert identity.port is None

    def test_userinfo_not_in_netloc(self):
        identity = parse_gitlab_url("https://user:pw@gitlab.example.com:8443/g/p")
        assert identity.netloc == "gitlab.example.com:8443"

    def test_invalid_port(self):
        with pytest.raises(InvalidRepositoryUrlError):
            parse_gitlab_url("https://gitlab.example.com:99999/g/p")
