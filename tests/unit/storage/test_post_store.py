"""Tests for PostStore — JSON document per post."""

import json
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from filedb.exceptions import StorageIOError
from filedb.schemas.post import Post
from filedb.storage.post_store import PostStore
from filedb.storage.sequence import SequenceGenerator


def _post(title: str = "Title", content: str = "Body", writer: str = "kim") -> Post:
    return Post(title=title, content=content, writer=writer)


# ===========================================================================
# Save
# ===========================================================================


class TestSave:
    def test_new_post_gets_id(self, post_store):
        saved = post_store.save(_post())
        assert saved.id == 1

    def test_ids_increase(self, post_store):
        ids = [post_store.save(_post()).id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_input_not_mutated(self, post_store):
        post = _post()
        post_store.save(post)
        assert post.id is None

    def test_writes_document_file(self, post_store):
        saved = post_store.save(_post(title="Hello"))
        path = post_store.posts_dir / f"{saved.id}.json"
        assert path.exists()
        doc = json.loads(path.read_text(encoding="utf-8"))
        assert doc["id"] == 1
        assert doc["title"] == "Hello"

    def test_document_uses_camel_case_keys(self, post_store, sample_post):
        saved = post_store.save(sample_post)
        doc = json.loads((post_store.posts_dir / f"{saved.id}.json").read_text(encoding="utf-8"))
        assert "createdAt" in doc
        assert "updatedAt" in doc
        assert "imageFilename" in doc
        assert "created_at" not in doc

    def test_document_is_pretty_printed(self, post_store):
        saved = post_store.save(_post())
        text = (post_store.posts_dir / f"{saved.id}.json").read_text(encoding="utf-8")
        assert text.count("\n") > 3

    def test_sequence_matches_highest_id(self, post_store, sequence):
        for _ in range(5):
            post_store.save(_post())
        assert sequence.current("post") == 5

    def test_update_overwrites_same_file(self, post_store):
        saved = post_store.save(_post(title="Old"))
        post_store.save(saved.model_copy(update={"title": "New"}))

        files = list(post_store.posts_dir.glob("*.json"))
        assert len(files) == 1
        assert post_store.find_by_id(saved.id).title == "New"

    def test_update_does_not_allocate(self, post_store, sequence):
        saved = post_store.save(_post())
        post_store.save(saved.model_copy(update={"title": "Again"}))
        assert sequence.current("post") == 1

    def test_update_is_full_replace(self, post_store):
        saved = post_store.save(_post(title="T", content="C", writer="W"))
        post_store.save(Post(id=saved.id, title="Only title"))
        loaded = post_store.find_by_id(saved.id)
        assert loaded.title == "Only title"
        assert loaded.content is None
        assert loaded.writer is None

    def test_write_failure_raises_storage_error(self, post_store):
        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            with pytest.raises(StorageIOError):
                post_store.save(Post(id=3, title="x"))

    def test_ids_not_reused_after_delete(self, post_store):
        first = post_store.save(_post())
        post_store.delete_by_id(first.id)
        assert post_store.save(_post()).id == 2


# ===========================================================================
# Find
# ===========================================================================


class TestFind:
    def test_round_trip(self, post_store, sample_post):
        saved = post_store.save(sample_post)
        assert post_store.find_by_id(saved.id) == saved

    def test_missing_returns_none(self, post_store):
        assert post_store.find_by_id(99) is None

    def test_find_all_empty_when_directory_missing(self, post_store):
        assert not post_store.posts_dir.exists()
        assert post_store.find_all() == []

    def test_find_all_newest_first(self, post_store):
        for i in range(4):
            post_store.save(_post(title=f"P{i}"))
        assert [p.id for p in post_store.find_all()] == [4, 3, 2, 1]

    def test_find_all_sorts_numerically(self, post_store):
        for i in range(11):
            post_store.save(_post(title=f"P{i}"))
        ids = [p.id for p in post_store.find_all()]
        assert ids[0] == 11
        assert ids == sorted(ids, reverse=True)

    def test_find_all_ignores_other_files(self, post_store):
        post_store.save(_post())
        (post_store.posts_dir / "notes.txt").write_text("ignore me", encoding="utf-8")
        assert len(post_store.find_all()) == 1

    def test_malformed_document_raises(self, post_store):
        post_store.save(_post())
        (post_store.posts_dir / "2.json").write_text("{broken", encoding="utf-8")
        with pytest.raises(StorageIOError):
            post_store.find_all()

    def test_non_utf8_document_raises(self, post_store):
        post_store.posts_dir.mkdir(parents=True)
        (post_store.posts_dir / "1.json").write_bytes(b"\xff\xfe{}")
        with pytest.raises(StorageIOError):
            post_store.find_by_id(1)
        with pytest.raises(StorageIOError):
            post_store.find_all()

    def test_count(self, post_store):
        assert post_store.count() == 0
        post_store.save(_post())
        post_store.save(_post())
        assert post_store.count() == 2


# ===========================================================================
# Delete
# ===========================================================================


class TestDelete:
    def test_delete_removes_file(self, post_store):
        saved = post_store.save(_post())
        post_store.delete_by_id(saved.id)
        assert post_store.find_by_id(saved.id) is None

    def test_deleted_post_not_listed(self, post_store):
        for _ in range(3):
            post_store.save(_post())
        post_store.delete_by_id(2)
        assert [p.id for p in post_store.find_all()] == [3, 1]

    def test_delete_missing_is_noop(self, post_store):
        post_store.delete_by_id(12345)

    def test_delete_failure_raises_storage_error(self, post_store):
        saved = post_store.save(_post())
        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            with pytest.raises(StorageIOError):
                post_store.delete_by_id(saved.id)


# ===========================================================================
# Search
# ===========================================================================


class TestSearch:
    def test_title_match_case_insensitive(self, post_store):
        post_store.save(_post(title="Hello"))
        post_store.save(_post(title="World"))
        assert [p.id for p in post_store.search("hello")] == [1]

    def test_content_match(self, post_store):
        post_store.save(_post(title="A", content="Python tips"))
        post_store.save(_post(title="B", content="Java tips"))
        assert [p.id for p in post_store.search("PYTHON")] == [1]

    def test_results_newest_first(self, post_store):
        for _ in range(3):
            post_store.save(_post(title="match"))
        assert [p.id for p in post_store.search("match")] == [3, 2, 1]

    def test_no_match(self, post_store):
        post_store.save(_post(title="Hello"))
        assert post_store.search("absent") == []

    def test_null_fields_do_not_match(self, post_store):
        post_store.save(Post(title=None, content=None))
        assert post_store.search("none") == []

    def test_blank_keyword_rejected(self, post_store):
        with pytest.raises(ValueError):
            post_store.search("   ")


# ===========================================================================
# Concurrency
# ===========================================================================


class TestConcurrentSaves:
    def test_concurrent_creates_get_distinct_ids(self, settings):
        store = PostStore(settings.posts_dir, SequenceGenerator(settings.sequence_file))
        ids: list[int] = []
        ids_lock = threading.Lock()

        def worker(n: int):
            for i in range(10):
                saved = store.save(_post(title=f"t{n}-{i}"))
                with ids_lock:
                    ids.append(saved.id)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(ids) == list(range(1, 61))
        assert store.count() == 60
        seq_doc = json.loads(settings.sequence_file.read_text(encoding="utf-8"))
        assert seq_doc["post"] == 60
