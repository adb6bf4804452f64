"""Tests for the command-line entry point."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

import main as cli
from config import settings
from contracts import MINIMAL, Topic, TopicStatus, TopicUniverse
from providers import UsageTotals
from storage import TopicUniverseRepository


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "universes_dir", str(tmp_path))
    return TopicUniverseRepository(tmp_path)


def kafka_universe():
    return TopicUniverse(
        name="Apache Kafka",
        topics=[
            Topic.create("Apache Kafka", status=TopicStatus.ACCEPTED, is_landing_page=True),
            Topic.create("Partitions", status=TopicStatus.ACCEPTED),
        ],
    )


def reasoning():
    mock = MagicMock()
    mock.usage = UsageTotals(calls=3, input_tokens=1200, output_tokens=300)
    return mock


class TestReadOnlyCommands:
    """Test --list, --show and --export."""

    def test_list_empty(self, store):
        result = CliRunner().invoke(cli.main, ["--list"])
        assert result.exit_code == 0
        assert "No saved universes" in result.output

    def test_list_and_show(self, store):
        saved = kafka_universe()
        store.save(saved)
        listed = CliRunner().invoke(cli.main, ["--list"])
        assert saved.id in listed.output

        shown = CliRunner().invoke(cli.main, ["--show", saved.id])
        assert shown.exit_code == 0
        assert "Partitions" in shown.output
        assert "2 topics" in shown.output

    def test_show_unknown_id(self, store):
        result = CliRunner().invoke(cli.main, ["--show", "missing"])
        assert result.exit_code == 1
        assert "No universe with id missing" in result.output

    def test_export(self, store, tmp_path):
        saved = kafka_universe()
        store.save(saved)
        target = tmp_path / "out" / "kafka.json"
        result = CliRunner().invoke(cli.main, ["--export", saved.id, str(target)])
        assert result.exit_code == 0
        assert store.load_from_path(target).id == saved.id


class TestDiscoveryCommands:
    """Test launching discovery runs."""

    def test_autonomous_requires_domain(self, store):
        with patch("main.get_provider", return_value=reasoning()):
            result = CliRunner().invoke(cli.main, ["--autonomous"])
        assert result.exit_code == 1
        assert "--domain is required" in result.output

    def test_unknown_provider_exits(self, store):
        with patch("main.get_provider", side_effect=ValueError("Unknown provider: x")):
            result = CliRunner().invoke(cli.main, ["--autonomous", "--domain", "Kafka"])
        assert result.exit_code == 1
        assert "Unknown provider" in result.output

    def test_autonomous_run_is_saved(self, store):
        universe = kafka_universe()
        with patch("main.get_provider", return_value=reasoning()), \
                patch("main.AutonomousDiscoverySession") as session_cls:
            session_cls.return_value.run.return_value = universe
            result = CliRunner().invoke(cli.main, [
                "--autonomous", "--domain", "Apache Kafka", "--seed", "Topics",
                "--cost-profile", "minimal", "--confidence", "0.9", "--no-search",
            ])

        assert result.exit_code == 0, result.output
        config = session_cls.call_args[0][0]
        assert config.cost_profile == MINIMAL
        assert config.confidence_threshold == 0.9
        assert config.seed_topics == ["Topics"]
        assert store.exists(universe.id)
        assert "Topic Universe: Apache Kafka" in result.output
        assert "3 reasoning calls" in result.output

    def test_dry_run_saves_nothing(self, store):
        with patch("main.get_provider", return_value=reasoning()), \
                patch("main.AutonomousDiscoverySession") as session_cls:
            session_cls.return_value.run.return_value = None
            result = CliRunner().invoke(cli.main, ["-a", "-d", "Apache Kafka", "--dry-run", "--no-search"])
        assert result.exit_code == 0
        assert session_cls.call_args[0][0].dry_run
        assert store.list_all() == []

    def test_interactive_is_default(self, store):
        with patch("main.get_provider", return_value=reasoning()), \
                patch("main.InteractiveDiscoverySession") as session_cls:
            session_cls.return_value.run.return_value = None
            result = CliRunner().invoke(cli.main, ["--domain", "Apache Kafka", "--no-search"])
        assert result.exit_code == 0
        assert session_cls.call_args.kwargs["domain_name"] == "Apache Kafka"
        assert session_cls.call_args.kwargs["cost_profile"] is None
