"""Tests for the manage_config CLI."""

import json

import pytest

import manage_config


def write_json(path, value):
    path.write_text(json.dumps(value), encoding="utf-8")
    return str(path)


class TestResolveCommand:
    """Tests for ``manage_config.py resolve``."""

    def test_prints_merged_config(self, tmp_path, capsys):
        org = write_json(tmp_path / "org.json", {"plugins": ["reviewers"]})
        repo = write_json(tmp_path / "repo.json", {"plugins": ["wip", "bogus"]})

        manage_config.main(["resolve", org, repo])

        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"plugins": ["reviewers", "wip"]}
        assert "unknown plugin 'bogus'" in captured.err

    def test_dash_means_no_config(self, tmp_path, capsys):
        org = write_json(tmp_path / "org.json", {"plugins": ["wip"]})

        manage_config.main(["resolve", org, "-"])

        assert json.loads(capsys.readouterr().out) == {"plugins": ["wip"]}


class TestDoctorCommand:
    """Tests for ``manage_config.py doctor``."""

    def test_valid_config(self, tmp_path, capsys):
        path = write_json(tmp_path / ".pullierc", {"plugins": ["wip", {"plugin": "jira"}]})

        manage_config.main(["doctor", path])

        assert "All checks passed. 2 plugin(s) referenced." in capsys.readouterr().out

    def test_reports_problems(self, tmp_path, capsys):
        path = write_json(tmp_path / ".pullierc", {"plugins": ["wip", "wip", "bogus", 42]})

        with pytest.raises(SystemExit) as exc_info:
            manage_config.main(["doctor", path])

        out = capsys.readouterr().out
        assert exc_info.value.code == 1
        assert "Found 3 issue(s)" in out
        assert "Unknown plugin 'bogus'" in out
        assert "listed more than once" in out

    def test_manifest_with_bad_exclude(self, tmp_path, capsys):
        path = write_json(tmp_path / ".pullierc", {"plugins": {"exclude": "wip", "include": ["jira"]}})

        with pytest.raises(SystemExit):
            manage_config.main(["doctor", path])

        assert "'plugins.exclude' must be a list" in capsys.readouterr().out

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / ".pullierc"
        path.write_text("{nope", encoding="utf-8")

        with pytest.raises(SystemExit):
            manage_config.main(["doctor", str(path)])

        assert "invalid JSON" in capsys.readouterr().out


class TestListCommand:
    def test_lists_bundled_plugins(self, capsys):
        manage_config.main(["list"])

        out = capsys.readouterr().out
        for name in ("jira", "requiredFile", "reviewers", "welcome", "wip"):
            assert name in out
