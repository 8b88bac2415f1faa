"""
Tests for the command-line interface.
"""
import pytest

from main import MoodTuneApp, create_parser, main


class TestParser:

    def test_generate_defaults(self):
        args = create_parser().parse_args(["generate", "Best day ever"])
        assert args.command == "generate"
        assert args.text == "Best day ever"
        assert args.user == "cli"
        assert args.tracks is None
        assert args.name is None

    def test_generate_options(self):
        args = create_parser().parse_args(
            ["generate", "rainy sunday", "--user", "alice", "--tracks", "5", "--name", "Rain"]
        )
        assert (args.user, args.tracks, args.name) == ("alice", 5, "Rain")

    def test_map_options(self):
        args = create_parser().parse_args(
            ["map", "--emotion", "sadness", "--emotion-score", "0.6", "--positivity", "0.1"]
        )
        assert args.emotion == "sadness"
        assert args.emotion_score == 0.6
        assert args.positivity == 0.1

    def test_serve_defaults(self):
        args = create_parser().parse_args(["serve"])
        assert (args.host, args.port) == ("0.0.0.0", 8000)


def test_map_offline_prints_features(capsys):
    MoodTuneApp().map_offline("joy", 1.0, 0.5)

    out = capsys.readouterr().out
    assert "Dominant emotion: joy" in out
    assert "Tempo: 135.0 BPM" in out
    assert "Genre seeds: pop,dance,party" in out


def test_no_command_exits_with_help(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["main.py"])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1
    assert "usage:" in capsys.readouterr().out
