"""Tests for universe persistence."""

from datetime import datetime, timedelta

import pytest

from contracts import Topic, TopicStatus, TopicUniverse
from storage import PersistenceError, TopicUniverseRepository


def universe(name="Apache Kafka", **fields):
    topics = [Topic.create(name, status=TopicStatus.ACCEPTED, is_landing_page=True)]
    return TopicUniverse(name=name, topics=topics, **fields)


class TestTopicUniverseRepository:
    """Test TopicUniverseRepository."""

    def test_save_and_load(self, tmp_path):
        repo = TopicUniverseRepository(tmp_path)
        original = universe()
        path = repo.save(original)
        assert path == tmp_path / f"{original.id}.json"
        assert repo.exists(original.id)
        loaded = repo.load(original.id)
        assert loaded == original

    def test_load_missing(self, tmp_path):
        assert TopicUniverseRepository(tmp_path).load("nope") is None

    def test_save_creates_directory(self, tmp_path):
        repo = TopicUniverseRepository(tmp_path / "nested" / "universes")
        repo.save(universe())
        assert len(repo.list_all()) == 1

    def test_export_to_path(self, tmp_path):
        repo = TopicUniverseRepository(tmp_path / "store")
        target = tmp_path / "exports" / "kafka.json"
        saved = repo.save_to_path(universe(), target)
        assert saved == target
        assert repo.load_from_path(target).name == "Apache Kafka"

    def test_list_all_newest_first_and_skips_garbage(self, tmp_path):
        repo = TopicUniverseRepository(tmp_path)
        old = universe("Old", created_at=datetime.now() - timedelta(days=1))
        new = universe("New")
        repo.save(old)
        repo.save(new)
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        assert [u.name for u in repo.list_all()] == ["New", "Old"]

    def test_list_all_missing_directory(self, tmp_path):
        assert TopicUniverseRepository(tmp_path / "absent").list_all() == []

    def test_invalid_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"name": ""}', encoding="utf-8")
        with pytest.raises(PersistenceError):
            TopicUniverseRepository(tmp_path).load_from_path(path)

    def test_unwritable_path_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(PersistenceError):
            TopicUniverseRepository(tmp_path).save_to_path(universe(), blocker / "child.json")
