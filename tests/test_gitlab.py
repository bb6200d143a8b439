"""
Tests for the GitLab API client.

Tests cover:
- Endpoint construction (URL-encoded namespace, self-hosted hosts)
- get_latest_tag / get_tag / get_branch / get_latest_commit_time
- get_remote_file base64 decoding and its failure modes
- private_token on API calls and archive URLs
- Degrade-to-None on 404, transport errors and malformed JSON
"""

import pytest

from conftest import FakeTransport, base64_file
from vcsupdate.errors import InvalidRepositoryUrlError, TransportError
from vcsupdate.vcs.gitlab import GitLabApi

API = "https://gitlab.com/api/v4/projects/group%2Fproject"
TAGS = [
    {"name": "v1.2.0", "commit": {"committed_date": "2023-01-01T00:00:00.000+00:00"}},
    {"name": "v1.10.0", "commit": {"committed_date": "2023-06-01T00:00:00.000+00:00"}},
    {"name": "v1.9.0", "commit": {"committed_date": "2023-05-01T00:00:00.000+00:00"}},
    {"name": "release-notes", "commit": {"committed_date": "2024-01-01T00:00:00.000+00:00"}},
]


@pytest.fixture
def client(transport):
    return GitLabApi("https://gitlab.com/group/project", transport=transport)


class TestConstruction:

    def test_namespace(self, client):
        assert client.namespace == "group/project"
        assert repr(client) == "GitLabApi('group/project')"

    def test_invalid_url_raises(self, transport):
        with pytest.raises(InvalidRepositoryUrlError):
            GitLabApi("https://gitlab.com/group", transport=transport)

    def test_nested_groups_are_encoded(self, transport):
        client = GitLabApi("https://gitlab.com/group/sub/repo", transport=transport)
        client.get_branch("master")
        assert transport.urls == [
            "https://gitlab.com/api/v4/projects/group%2Fsub%2Frepo/repository/branches/master"
        ]

    def test_self_hosted_host(self, transport):
        client = GitLabApi("https://git.example.org/team/tool", transport=transport)
        client.get_branch("master")
        assert transport.urls[0].startswith("https://git.example.org/api/v4/projects/team%2Ftool/")
        assert client.build_archive_download_url("1.0") == \
            "https://git.example.org/team/tool/repository/archive.zip?ref=1.0"

    def test_short_form_uses_gitlab_com(self, transport):
        client = GitLabApi("group/project", transport=transport)
        assert client.build_archive_download_url("main").startswith("https://gitlab.com/group/project/")

    def test_self_hosted_port_is_kept(self, transport):
        client = GitLabApi("https://gitlab.example.com:8443/g/p", transport=transport)
        assert client.base_url == "https://gitlab.example.com:8443"
        client.get_branch("master")
        assert transport.urls[0].startswith("https://gitlab.example.com:8443/api/v4/projects/g%2Fp/")
        assert client.build_archive_download_url("1.0").startswith("https://gitlab.example.com:8443/g/p/")

    def test_ssh_remote_uses_https_default_port(self, transport):
        client = GitLabApi("ssh://git@gitlab.example.com:2222/group/project.git", transport=transport)
        assert client.namespace == "group/project"
        assert client.base_url == "https://gitlab.example.com"


class TestTags:

    def test_latest_tag_is_highest_version(self, client, transport):
        transport.add(f"{API}/repository/tags", TAGS)

        ref = client.get_latest_tag()

        assert ref.name == "v1.10.0"
        assert ref.version == "1.10.0"
        assert ref.updated == "2023-06-01T00:00:00.000+00:00"
        assert ref.download_url == "https://gitlab.com/group/project/repository/archive.zip?ref=v1.10.0"

    def test_latest_tag_none_without_version_tags(self, client, transport):
        transport.add(f"{API}/repository/tags", [{"name": "nightly"}])
        assert client.get_latest_tag() is None

    def test_latest_tag_none_when_empty(self, client, transport):
        transport.add(f"{API}/repository/tags", [])
        assert client.get_latest_tag() is None

    def test_latest_tag_none_on_error(self, client):
        assert client.get_latest_tag() is None

    def test_version_tags(self, client, transport):
        transport.add(f"{API}/repository/tags", TAGS)
        assert client.get_version_tags() == ["v1.10.0", "v1.9.0", "v1.2.0"]

    def test_get_tag(self, client, transport):
        transport.add(f"{API}/repository/tags/v2.0.0", {
            "name": "v2.0.0",
            "commit": {"committed_date": "2024-02-02T00:00:00.000+00:00"},
        })

        ref = client.get_tag("v2.0.0")

        assert ref.name == "v2.0.0"
        assert ref.version == "2.0.0"
        assert ref.updated == "2024-02-02T00:00:00.000+00:00"

    def test_get_tag_non_version_name_still_reachable(self, client, transport):
        transport.add(f"{API}/repository/tags/release-notes", {"name": "release-notes"})
        ref = client.get_tag("release-notes")
        assert ref.name == "release-notes"

    def test_get_tag_missing(self, client):
        assert client.get_tag("v9.9.9") is None


class TestBranches:

    def test_get_branch(self, client, transport):
        transport.add(f"{API}/repository/branches/master", {
            "name": "master",
            "commit": {"committed_date": "2024-03-03T10:00:00.000+00:00"},
        })

        ref = client.get_branch("master")

        assert ref.name == "master"
        assert ref.version is None
        assert ref.updated == "2024-03-03T10:00:00.000+00:00"
        assert ref.download_url.endswith("archive.zip?ref=master")

    def test_branch_without_commit(self, client, transport):
        transport.add(f"{API}/repository/branches/dev", {"name": "dev"})
        assert client.get_branch("dev").updated is None

    def test_branch_name_is_encoded(self, client, transport):
        client.get_branch("feature/x")
        assert transport.urls == [f"{API}/repository/branches/feature%2Fx"]

    def test_latest_commit_time(self, client, transport):
        transport.add(f"{API}/repository/commits", [
            {"id": "abc", "committed_date": "2024-04-04T00:00:00Z"},
            {"id": "def", "committed_date": "2024-01-01T00:00:00Z"},
        ])
        assert client.get_latest_commit_time("master") == "2024-04-04T00:00:00Z"
        assert "ref_name=master" in transport.urls[0]

    def test_latest_commit_time_empty(self, client, transport):
        transport.add(f"{API}/repository/commits", [])
        assert client.get_latest_commit_time("master") is None

    def test_latest_commit_for_path(self, client, transport):
        transport.add(f"{API}/repository/commits", [{"id": "abc"}])
        assert client.get_latest_commit("readme.txt", "v1.0") == {"id": "abc"}
        assert "path=readme.txt" in transport.urls[0]
        assert "ref_name=v1.0" in transport.urls[0]


class TestRemoteFile:

    def test_decodes_base64(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt", base64_file("Stable tag: 1.0\n"))
        assert client.get_remote_file("readme.txt", "master") == "Stable tag: 1.0\n"

    def test_default_ref_is_default_branch(self, client, transport):
        client.get_remote_file("readme.txt")
        assert transport.urls == [f"{API}/repository/files/readme.txt?ref=master"]

    def test_path_is_encoded(self, client, transport):
        client.get_remote_file("docs/readme.txt", "main")
        assert transport.urls[0].startswith(f"{API}/repository/files/docs%2Freadme.txt?")

    def test_wrong_encoding(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt", base64_file("x", encoding="text"))
        assert client.get_remote_file("readme.txt") is None

    def test_missing_content(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt", {"encoding": "base64"})
        assert client.get_remote_file("readme.txt") is None

    def test_not_utf8(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt", {"encoding": "base64", "content": "//4="})
        assert client.get_remote_file("readme.txt") is None

    def test_malformed_json(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt", raw="<html>oops</html>")
        assert client.get_remote_file("readme.txt") is None

    def test_transport_error(self, client, transport):
        transport.fail(f"{API}/repository/files/readme.txt", TransportError("connection refused"))
        assert client.get_remote_file("readme.txt") is None

    def test_server_error(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt", {"message": "boom"}, status=500)
        assert client.get_remote_file("readme.txt") is None

    def test_changelog_first_match(self, client, transport):
        transport.add(f"{API}/repository/files/CHANGELOG.md", base64_file("## 1.0\n"))
        assert client.get_remote_changelog("master") == "## 1.0\n"
        assert len(transport.requests) == 2

    def test_changelog_missing(self, client):
        assert client.get_remote_changelog() is None

    def test_readme_headers(self, client, transport):
        transport.add(f"{API}/repository/files/readme.txt",
                      base64_file("=== Demo ===\nStable tag: 2.1\n"))
        assert client.get_remote_readme("master") == {"name": "Demo", "stable_tag": "2.1"}


class TestAuthentication:

    def test_private_token_on_api_calls(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", "s3cret", transport=transport)
        client.get_branch("master")
        assert transport.urls == [f"{API}/repository/branches/master?private_token=s3cret"]

    def test_archive_url_signed(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", "s3cret", transport=transport)
        assert client.build_archive_download_url("v1.0") == \
            "https://gitlab.com/group/project/repository/archive.zip?ref=v1.0&private_token=s3cret"

    def test_set_authentication_replaces_token(self, client, transport):
        client.set_authentication("first")
        client.set_authentication("second")
        client.get_branch("master")
        assert transport.urls[0].endswith("private_token=second")

    def test_set_authentication_clears_token(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", "s3cret", transport=transport)
        client.set_authentication(None)
        assert client.credentials is None
        assert "private_token" not in client.build_archive_download_url("v1.0")

    def test_sign_without_credentials_is_noop(self, client):
        url = "https://gitlab.com/group/project/repository/archive.zip?ref=v1.0"
        assert client.sign_download_url(url) == url

    def test_sign_is_idempotent(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", "s3cret", transport=transport)
        signed = client.build_archive_download_url("v1.0")
        assert client.sign_download_url(signed) == signed
        assert signed.count("private_token=") == 1

    def test_sign_url_without_query(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", "s3cret", transport=transport)
        assert client.sign_download_url("https://gitlab.com/a.zip") == \
            "https://gitlab.com/a.zip?private_token=s3cret"

    def test_sign_keeps_existing_query_bytes(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", "s3cret", transport=transport)
        assert client.build_archive_download_url("feature/x") == \
            "https://gitlab.com/group/project/repository/archive.zip?ref=feature%2Fx&private_token=s3cret"
        assert client.sign_download_url("https://gitlab.com/a.zip?path=a%2Fb&x=1+2") == \
            "https://gitlab.com/a.zip?path=a%2Fb&x=1+2&private_token=s3cret"

    def test_timeout_passed_to_transport(self, transport):
        client = GitLabApi("https://gitlab.com/group/project", transport=transport, timeout=3)
        client.get_branch("master")
        assert transport.requests[0][1]["timeout"] == 3

    def test_default_timeout(self, client, transport):
        client.get_branch("master")
        assert transport.requests[0][1]["timeout"] == 10


def test_ref_in_archive_url_is_encoded(client):
    assert client.build_archive_download_url("feature/x").endswith("?ref=feature%2Fx")
