"""Tests for the access token cache.

Key behaviors:
- A record is valid only while now < createdAt + expireIn * 1000
- Reading never raises, whatever the file holds
- Deleting reports False when there was nothing to delete
"""
import json

import pytest

from leiga_mcp.token_store import InMemoryCredentialStore, TokenManager, TokenRecord


CREATED_AT = 1_700_000_000_000


def write_token(path, **overrides):
    data = {"accessToken": "tok-abc", "expireIn": 7200, "createdAt": CREATED_AT}
    data.update(overrides)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def token_path(tmp_path):
    return tmp_path / ".leiga" / "leiga-token.json"


@pytest.fixture
def manager(token_path):
    return TokenManager(token_path)


class TestHasRecord:
    """Test the existence check."""

    def test_missing_file(self, manager):
        assert manager.has_record() is False

    def test_existing_file(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        write_token(token_path)
        assert manager.has_record() is True

    def test_directory_is_not_a_record(self, tmp_path):
        """A directory at the token path is not a readable file."""
        (tmp_path / "leiga-token.json").mkdir()
        assert TokenManager(tmp_path / "leiga-token.json").has_record() is False

    def test_garbage_still_counts_as_present(self, manager, token_path):
        """Existence only, no parsing."""
        token_path.parent.mkdir(parents=True)
        token_path.write_text("not json")
        assert manager.has_record() is True


class TestReadRecord:
    """Test that reads fail soft."""

    def test_reads_well_formed_record(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        write_token(token_path)

        record = manager.read_record()

        assert record == TokenRecord(access_token="tok-abc", expire_in=7200, created_at=CREATED_AT)

    def test_missing_file_returns_none(self, manager):
        assert manager.read_record() is None

    @pytest.mark.parametrize("content", [
        "",
        "{",
        '{"accessToken": "tok"',
        "not json at all",
        "null",
        "[]",
        '"a string"',
        '{"accessToken": "tok"}',
        '{"accessToken": "tok", "expireIn": "soon", "createdAt": 1}',
    ])
    def test_malformed_content_returns_none(self, manager, token_path, content):
        token_path.parent.mkdir(parents=True)
        token_path.write_text(content, encoding="utf-8")
        assert manager.read_record() is None

    def test_binary_content_returns_none(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        token_path.write_bytes(b"\xff\xfe\x00\x81garbage")
        assert manager.read_record() is None

    def test_deeply_nested_content_returns_none(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        token_path.write_text("[" * 100_000 + "]" * 100_000, encoding="utf-8")
        assert manager.read_record() is None
        assert manager.is_valid(now_ms=CREATED_AT) is False


class TestIsValid:
    """Test expiry arithmetic in epoch milliseconds."""

    def test_no_record_is_invalid(self, manager):
        assert manager.is_valid(now_ms=CREATED_AT) is False

    def test_before_expiry_is_valid(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        write_token(token_path, expireIn=60)
        assert manager.is_valid(now_ms=CREATED_AT + 59_999) is True

    def test_exact_expiry_is_invalid(self, manager, token_path):
        """now == createdAt + expireIn*1000 counts as expired."""
        token_path.parent.mkdir(parents=True)
        write_token(token_path, expireIn=60)
        assert manager.is_valid(now_ms=CREATED_AT + 60_000) is False

    def test_after_expiry_is_invalid(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        write_token(token_path, expireIn=60)
        assert manager.is_valid(now_ms=CREATED_AT + 120_000) is False

    def test_uses_current_time_by_default(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        write_token(token_path, createdAt=0, expireIn=1)
        assert manager.is_valid() is False

    def test_garbage_file_is_invalid(self, manager, token_path):
        token_path.parent.mkdir(parents=True)
        token_path.write_text("{{{")
        assert manager.is_valid(now_ms=CREATED_AT) is False


class TestSaveAndDelete:
    """Test record replacement and removal."""

    def test_save_creates_parent_directory(self, manager, token_path):
        manager.save_record(TokenRecord.issue("tok-new", 3600, now_ms=CREATED_AT))

        assert json.loads(token_path.read_text()) == {
            "accessToken": "tok-new",
            "expireIn": 3600,
            "createdAt": CREATED_AT,
        }

    def test_save_replaces_existing_record(self, manager):
        manager.save_record(TokenRecord.issue("first", 10, now_ms=1))
        manager.save_record(TokenRecord.issue("second", 20, now_ms=2))

        record = manager.read_record()
        assert record.access_token == "second"
        assert record.expires_at == 2 + 20_000

    def test_delete_existing_record(self, manager):
        manager.save_record(TokenRecord.issue("tok", 10))
        assert manager.delete_record() is True
        assert manager.has_record() is False

    def test_delete_without_record_returns_false(self, manager):
        assert manager.delete_record() is False
        assert manager.has_record() is False

    def test_delete_failure_returns_false(self, manager, monkeypatch):
        manager.save_record(TokenRecord.issue("tok", 10))

        def refuse(self, missing_ok=False):
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr(type(manager.path), "unlink", refuse)
        assert manager.delete_record() is False

    def test_delete_unreadable_record(self, manager, token_path, monkeypatch):
        """Deletion needs the file to exist, not to be readable."""
        manager.save_record(TokenRecord.issue("tok", 10))
        monkeypatch.setattr("leiga_mcp.token_store.os.access", lambda *args, **kwargs: False)

        assert manager.has_record() is False
        assert manager.delete_record() is True
        assert not token_path.exists()


class TestInMemoryCredentialStore:
    """The in-memory store follows the same contract."""

    def test_lifecycle(self):
        store = InMemoryCredentialStore()
        assert store.has_record() is False
        assert store.read_record() is None
        assert store.is_valid(now_ms=0) is False

        store.save_record(TokenRecord.issue("tok", 1, now_ms=1000))
        assert store.is_valid(now_ms=1999) is True
        assert store.is_valid(now_ms=2000) is False

        assert store.delete_record() is True
        assert store.delete_record() is False
        assert store.has_record() is False
