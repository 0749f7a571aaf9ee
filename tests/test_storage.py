"""
Tests for the storage package: backends, credentials and content pools.
"""

import json
import os
import platform
import random
from collections import Counter

import pytest

from errors import EmptyContentPool, StoreUnavailable
from oauth.models import TokenPair
from storage import ContentStore, CredentialStore, InMemoryBackend, JsonFileBackend
from storage.content import SAMPLE_POSTS
from storage.models import CREDENTIAL_HEADER, Credential, mask_token


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class TestInMemoryBackend:
    def test_missing_sheet_reads_none(self) -> None:
        assert InMemoryBackend().read_rows("nope") is None

    def test_row_operations(self) -> None:
        backend = InMemoryBackend({"s": [["a"], ["b"]]})
        backend.append_row("s", ["c"])
        backend.update_row("s", 0, ["A"])
        backend.delete_row("s", 1)
        assert backend.read_rows("s") == [["A"], ["c"]]

    def test_create_sheet_does_not_overwrite(self) -> None:
        backend = InMemoryBackend({"s": [["keep"]]})
        backend.create_sheet("s", [["replaced"]])
        assert backend.read_rows("s") == [["keep"]]

    def test_read_returns_a_copy(self) -> None:
        backend = InMemoryBackend({"s": [["a"]]})
        backend.read_rows("s")[0][0] = "mutated"
        assert backend.read_rows("s") == [["a"]]

    def test_mutating_missing_sheet_raises(self) -> None:
        with pytest.raises(StoreUnavailable):
            InMemoryBackend().append_row("nope", ["x"])


class TestJsonFileBackend:
    def test_persists_across_instances(self, tmp_path) -> None:
        path = tmp_path / "nested" / "workbook.json"
        JsonFileBackend(path).create_sheet("s", [["header"], ["row"]])

        assert JsonFileBackend(path).read_rows("s") == [["header"], ["row"]]
        assert json.loads(path.read_text())["sheets"]["s"] == [["header"], ["row"]]

    @pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
    def test_file_is_owner_only(self, tmp_path) -> None:
        path = tmp_path / "workbook.json"
        JsonFileBackend(path).create_sheet("s", [["x"]])
        assert os.stat(path).st_mode & 0o777 == 0o600

    def test_corrupt_file_raises(self, tmp_path) -> None:
        path = tmp_path / "workbook.json"
        path.write_text("{broken")
        with pytest.raises(StoreUnavailable):
            JsonFileBackend(path).read_rows("s")

    def test_no_temp_files_left(self, tmp_path) -> None:
        backend = JsonFileBackend(tmp_path / "workbook.json")
        backend.create_sheet("s", [["x"]])
        backend.append_row("s", ["y"])
        assert [p.name for p in tmp_path.iterdir()] == ["workbook.json"]

    def test_write_failure_raises_store_unavailable(self, tmp_path, monkeypatch) -> None:
        backend = JsonFileBackend(tmp_path / "workbook.json")
        backend.create_sheet("s", [["x"]])

        def disk_full(*args, **kwargs):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr("storage.backends.os.replace", disk_full)

        with pytest.raises(StoreUnavailable) as excinfo:
            backend.append_row("s", ["y"])
        assert "No space left on device" in str(excinfo.value)
        assert [p.name for p in tmp_path.iterdir()] == ["workbook.json"]

        monkeypatch.undo()
        assert backend.read_rows("s") == [["x"]]


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def _credential(user_id: str = "42", name: str = "alice") -> Credential:
    return Credential(user_id=user_id, user_name=name, access_token=f"at-{user_id}", refresh_token=f"rt-{user_id}")


class TestCredentialStore:
    def test_missing_sheet_raises(self, credentials: CredentialStore) -> None:
        with pytest.raises(StoreUnavailable):
            credentials.get_credentials()

    def test_upsert_creates_sheet_with_header(self, credentials: CredentialStore, backend) -> None:
        credentials.upsert_credentials(_credential())
        assert backend.read_rows("credentials") == [CREDENTIAL_HEADER, ["42", "alice", "at-42", "rt-42"]]

    def test_upsert_updates_in_place(self, credentials: CredentialStore) -> None:
        credentials.upsert_credentials(_credential("1", "one"))
        credentials.upsert_credentials(_credential("2", "two"))
        credentials.upsert_credentials(Credential("1", "renamed", "fresh", "fresh-rt"))

        stored = credentials.get_credentials()
        assert [c.user_id for c in stored] == ["1", "2"]
        assert stored[0] == Credential("1", "renamed", "fresh", "fresh-rt")

    def test_filter_by_user_and_skip_blank_ids(self, backend) -> None:
        backend.create_sheet("credentials", [
            CREDENTIAL_HEADER,
            ["", "ghost", "x", "y"],
            ["7", "seven", "a", "b"],
            ["8", "eight"],
        ])
        store = CredentialStore(backend, "credentials")

        assert [c.user_id for c in store.get_credentials()] == ["7", "8"]
        assert store.get_credentials("8") == [Credential("8", "eight", "", "")]
        assert store.get_credential("missing") is None

    def test_update_tokens(self, credentials: CredentialStore) -> None:
        credentials.upsert_credentials(_credential())
        assert credentials.update_tokens("42", TokenPair("new-at", "new-rt")) is True
        assert credentials.get_credential("42") == Credential("42", "alice", "new-at", "new-rt")

    def test_update_tokens_unknown_user(self, credentials: CredentialStore) -> None:
        credentials.upsert_credentials(_credential())
        assert credentials.update_tokens("99", TokenPair("a", "b")) is False

    def test_delete(self, credentials: CredentialStore) -> None:
        credentials.upsert_credentials(_credential("1"))
        credentials.upsert_credentials(_credential("2"))

        assert credentials.delete_credentials("1") is True
        assert credentials.delete_credentials("1") is False
        assert [c.user_id for c in credentials.get_credentials()] == ["2"]


class TestMaskToken:
    def test_masks(self) -> None:
        assert mask_token("") == ""
        assert mask_token("short") == "*****"
        assert mask_token("abcdefghijkl") == "abcd...ijkl"

    def test_summary_hides_secrets(self) -> None:
        summary = Credential("1", "one", "access-token-value", "refresh-token-value").summary()
        assert "access-token-value" not in summary.values()
        assert summary["user_name"] == "one"


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


class TestListContent:
    def test_missing_sheet_is_provisioned_with_samples(self, content: ContentStore, backend) -> None:
        assert content.list_content("fresh") == SAMPLE_POSTS
        assert backend.read_rows("fresh")[0] == ["post_content"]

    def test_idempotent(self, content: ContentStore, backend) -> None:
        first = content.list_content("fresh")
        rows = backend.read_rows("fresh")
        assert content.list_content("fresh") == first
        assert backend.read_rows("fresh") == rows

    def test_blank_cells_are_dropped(self, backend) -> None:
        backend.create_sheet("ch", [["  "], [""], ["valid"], []])
        assert ContentStore(backend, "auto").list_content("ch") == ["valid"]

    def test_cells_are_trimmed_and_order_kept(self, backend) -> None:
        backend.create_sheet("ch", [["  b  "], ["a"], ["c", "ignored column"]])
        assert ContentStore(backend, "auto").list_content("ch") == ["b", "a", "c"]


class TestHeaderModes:
    @pytest.mark.parametrize("first_cell", ["post_content", "Post Content", " TWEET ", "messages"])
    def test_auto_skips_keyword_header(self, backend, first_cell) -> None:
        backend.create_sheet("ch", [[first_cell], ["a"]])
        assert ContentStore(backend, "auto").list_content("ch") == ["a"]

    def test_auto_keeps_ordinary_first_row(self, backend) -> None:
        backend.create_sheet("ch", [["Posting content is fun"], ["a"]])
        assert ContentStore(backend, "auto").list_content("ch") == ["Posting content is fun", "a"]

    def test_always(self, backend) -> None:
        backend.create_sheet("ch", [["Anything"], ["a"]])
        assert ContentStore(backend, "always").list_content("ch") == ["a"]

    def test_never(self, backend) -> None:
        backend.create_sheet("ch", [["post_content"], ["a"]])
        assert ContentStore(backend, "never").list_content("ch") == ["post_content", "a"]

    def test_unknown_mode(self, backend) -> None:
        with pytest.raises(ValueError):
            ContentStore(backend, "sometimes")


class TestPickRandom:
    def test_empty_pool(self, backend) -> None:
        backend.create_sheet("ch", [["post_content"], ["   "]])
        with pytest.raises(EmptyContentPool) as excinfo:
            ContentStore(backend, "auto").pick_random("ch")
        assert excinfo.value.channel == "ch"

    def test_always_from_pool(self, content: ContentStore) -> None:
        pool = set(content.list_content("posts"))
        assert all(content.pick_random("posts") in pool for _ in range(50))

    def test_roughly_uniform(self, backend) -> None:
        backend.create_sheet("ch", [["post_content"], ["a"], ["b"], ["c"], ["d"]])
        store = ContentStore(backend, "auto", rng=random.Random(42))

        counts = Counter(store.pick_random("ch") for _ in range(10_000))

        assert set(counts) == {"a", "b", "c", "d"}
        for count in counts.values():
            assert 2200 < count < 2800
