"""
tests/test_repo.py — Helm repositories.yaml lookup.
"""

from pathlib import Path

import pytest

from helm_push.errors import RepositoryNotFound
from helm_push.repo import get_repo_by_name, load_repositories, repositories_file


class TestRepositoriesFile:
    def test_explicit_config(self):
        env = {"HELM_REPOSITORY_CONFIG": "/x/repos.yaml", "HELM_HOME": "/h"}
        assert repositories_file(env) == Path("/x/repos.yaml")

    def test_helm_home(self):
        env = {"HELM_HOME": "/h", "HELM_CONFIG_HOME": "/c"}
        assert repositories_file(env) == Path("/h/repository/repositories.yaml")

    def test_config_home(self):
        env = {"HELM_CONFIG_HOME": "/c", "XDG_CONFIG_HOME": "/xdg"}
        assert repositories_file(env) == Path("/c/repositories.yaml")

    def test_xdg(self):
        assert repositories_file({"XDG_CONFIG_HOME": "/xdg"}) == Path("/xdg/helm/repositories.yaml")

    def test_default(self):
        expected = Path.home() / ".config" / "helm" / "repositories.yaml"
        assert repositories_file({}) == expected


class TestLookup:
    def test_found(self, repo_config):
        repo = get_repo_by_name("chartmuseum", repo_config)
        assert repo.url == "https://cm.example.com/myrepo"
        assert repo.username == "stored-user"
        assert repo.password == "stored-pass"

    def test_missing_credentials_are_empty(self, repo_config):
        repo = get_repo_by_name("open", repo_config)
        assert repo.username == ""
        assert repo.password == ""

    def test_not_found(self, repo_config):
        with pytest.raises(RepositoryNotFound, match="nope"):
            get_repo_by_name("nope", repo_config)

    def test_missing_file(self, tmp_path):
        env = {"HELM_REPOSITORY_CONFIG": str(tmp_path / "absent.yaml")}
        assert load_repositories(env["HELM_REPOSITORY_CONFIG"]) == {}
        with pytest.raises(RepositoryNotFound):
            get_repo_by_name("chartmuseum", env)

    def test_url_used_directly(self):
        repo = get_repo_by_name("https://cm.example.com", {})
        assert repo.url == "https://cm.example.com"
        assert repo.username == ""

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "repositories.yaml"
        path.write_text("repositories: [\n")
        with pytest.raises(RepositoryNotFound, match="cannot parse"):
            get_repo_by_name("x", {"HELM_REPOSITORY_CONFIG": str(path)})
