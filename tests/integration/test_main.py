import json
from unittest.mock import patch

from wellness_engine import main
from wellness_engine.adapters.repositories.base import StoreConnectionError


class TestMainEntryPoint:
    """Command-line orchestration."""

    @patch("wellness_engine.main.setup_logger")
    def test_dry_run_with_data_file(self, mock_setup_logger, tmp_path, capsys):
        data = {
            "messages": [
                {"sender": "user", "text": "I am happy today. I feel great."},
                {"sender": "assistant", "text": "Lovely!"},
            ],
            "activities": [
                {"title": "Journaling", "completed": True, "streak": 2, "last_completed": "2025-03-12"},
            ],
        }
        data_file = tmp_path / "sample.json"
        data_file.write_text(json.dumps(data), encoding="utf-8")

        exit_code = main.main(["--user-id", "u1", "--dry-run", "--data", str(data_file), "--seed", "3"])

        profile = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert profile["user_id"] == "u1"
        assert profile["wellness_score"] == 10
        assert profile["common_topics"] == ["happiness", "feeling"]
        assert len(profile["recommended_practices"]) <= 3

    @patch("wellness_engine.main.setup_logger")
    def test_show_creates_default_profile(self, mock_setup_logger, capsys):
        exit_code = main.main(["--user-id", "u1", "--dry-run", "--show"])

        profile = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert profile["wellness_score"] == 5
        assert profile["mood_trends"] == {"calm": 0.7, "focused": 0.5}

    @patch("wellness_engine.main.setup_logger")
    @patch("wellness_engine.main.mongo_client.build_stores")
    def test_store_setup_failure_prints_default(self, mock_build, mock_setup_logger, capsys):
        mock_build.side_effect = StoreConnectionError("Connection timeout")

        exit_code = main.main(["--user-id", "u1"])

        profile = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert profile["wellness_score"] == 5
        assert profile["recommended_practices"][0]["title"] == "Daily Mindfulness"
