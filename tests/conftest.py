# File: conftest.py
# Directory: tests
# Purpose: Shared test fixtures: fake requests session for the LeetCode
#          GraphQL endpoint, fake PyGithub repository, sample config.
#
# Notes:
# - FakeSession routes each POST by its GraphQL operationName.
# - FakeRepo keeps files in memory and records every create/update.

import json

import pytest
from github import GithubException, UnknownObjectException

from leetcode_sync.config import Config

# --- Fake LeetCode transport ------------------------------------------------------------------

class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def graphql(data) -> FakeResponse:
    return FakeResponse(200, {"data": data})


class FakeSession:
    """Answers GraphQL POSTs with handlers keyed by operationName."""

    def __init__(self, handlers: dict):
        self.handlers = handlers
        self.calls = []

    def post(self, url, json=None, headers=None, **kwargs):
        self.calls.append({"url": url, "json": json, "headers": headers})
        handler = self.handlers[json["operationName"]]
        if callable(handler):
            return handler(json["variables"])
        return handler

    def operations(self) -> list:
        return [c["json"]["operationName"] for c in self.calls]


# --- Fake GitHub repository -------------------------------------------------------------------

class FakeContentFile:
    def __init__(self, path: str, content: bytes, sha: str):
        self.path = path
        self.decoded_content = content
        self.sha = sha


class FakeRepo:
    """In-memory stand-in for github.Repository.Repository."""

    def __init__(self, files: dict = None):
        self.files = {}
        self.shas = {}
        self.reads = []
        self.created = []
        self.updated = []
        self.directories = set()
        self.read_error = None
        for path, content in (files or {}).items():
            self._store(path, content.encode("utf-8") if isinstance(content, str) else content)

    def _store(self, path: str, content: bytes) -> None:
        self.files[path] = content
        self.shas[path] = f"sha-{len(self.created) + len(self.updated)}-{abs(hash(content))}"

    @property
    def commits(self) -> list:
        return self.created + self.updated

    def get_contents(self, path, ref=None):
        self.reads.append((path, ref))
        if self.read_error is not None:
            raise self.read_error
        if path in self.directories:
            return [FakeContentFile(f"{path}/a", b"", "sha-a")]
        if path not in self.files:
            raise UnknownObjectException(404, {"message": "Not Found"}, {})
        return FakeContentFile(path, self.files[path], self.shas[path])

    def create_file(self, path, message, content, branch=None):
        if path in self.files:
            raise GithubException(422, {"message": "sha wasn't supplied"}, {})
        self.created.append({"path": path, "message": message, "content": content, "branch": branch})
        self._store(path, content)
        return {"content": None, "commit": None}

    def update_file(self, path, message, content, sha, branch=None):
        if self.shas.get(path) != sha:
            raise GithubException(409, {"message": "sha does not match"}, {})
        self.updated.append({"path": path, "message": message, "content": content, "sha": sha, "branch": branch})
        self._store(path, content)
        return {"content": None, "commit": None}


# --- Fixtures ---------------------------------------------------------------------------------

@pytest.fixture
def config():
    return Config(
        leetcode_session="session-cookie",
        leetcode_csrf_token="csrf-token",
        github_token="gh-token",
        repo_owner="owner",
        repo_name="leetcode-solutions",
    )


@pytest.fixture
def fake_repo():
    return FakeRepo()
