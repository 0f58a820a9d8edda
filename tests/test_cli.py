"""Tests for the activity3d command line."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from activity3d.activity import Activity
from activity3d.cli import build_parser
from activity3d.cli import main
from activity3d.cli import resolve_date_range
from activity3d.core.errors import DomainError
from activity3d.core.errors import RemoteApiError
from activity3d.core.errors import ResponseParseError
from activity3d.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("SENTRY_DSN", raising=False)


@pytest.fixture
def fake_fetch(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    calls: list[dict] = []

    def fake_fetch_activity(username, date_range, token=None, settings=None):
        calls.append({"username": username, "date_range": date_range, "token": token})
        return Activity.from_days(date_range, [(date(2024, 1, 2), 3)])

    monkeypatch.setattr("activity3d.cli.fetch_activity", fake_fetch_activity)
    return calls


class TestArgumentParsing:
    def test_username_is_required(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2
        assert "username" in capsys.readouterr().err

    def test_defaults(self) -> None:
        args = build_parser().parse_args(["octocat"])

        assert args.username == "octocat"
        assert args.days is None
        assert args.format == "scad"
        assert args.output is None

    def test_rejects_malformed_dates(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["octocat", "--from", "01/02/2024"])

    def test_rejects_compact_iso_dates(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["octocat", "--from", "20240102"])


class TestResolveDateRange:
    def test_trailing_window_from_settings(self) -> None:
        args = build_parser().parse_args(["octocat"])

        date_range = resolve_date_range(
            args, Settings(activity_window_days=7), today=date(2024, 1, 8)
        )

        assert date_range == (date(2024, 1, 1), date(2024, 1, 8))

    def test_days_flag_overrides_settings(self) -> None:
        args = build_parser().parse_args(["octocat", "--days", "14"])

        date_range = resolve_date_range(args, Settings(), today=date(2024, 1, 15))

        assert date_range.start == date(2024, 1, 1)

    def test_days_cannot_be_combined_with_explicit_range(self) -> None:
        args = build_parser().parse_args(
            ["octocat", "--days", "30", "--from", "2024-01-01", "--to", "2024-01-31"]
        )

        with pytest.raises(DomainError):
            resolve_date_range(args, Settings())

    def test_days_longer_than_a_year_are_rejected(self) -> None:
        args = build_parser().parse_args(["octocat", "--days", "365"])

        with pytest.raises(DomainError):
            resolve_date_range(args, Settings(), today=date(2024, 12, 31))

    def test_from_requires_to(self) -> None:
        args = build_parser().parse_args(["octocat", "--from", "2024-01-01"])

        with pytest.raises(DomainError):
            resolve_date_range(args, Settings())


class TestMain:
    def test_writes_scad_to_stdout(
        self, fake_fetch: list[dict], capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = main(["octocat", "--from", "2024-01-01", "--to", "2024-01-14"])

        out = capsys.readouterr().out
        assert code == 0
        assert "    [0, 3, 0, 0, 0, 0, 0],\n    [0, 0, 0, 0, 0, 0, 0],\n" in out
        assert 'ghHandleTxt = "octocat";' in out
        assert 'spanTxt = "2024/1 - 2024/1";' in out
        assert fake_fetch[0]["token"] is None

    def test_reads_token_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, fake_fetch: list[dict]
    ) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        assert main(["octocat", "--days", "7"]) == 0
        assert fake_fetch[0]["token"] == "secret"

    def test_matrix_format(
        self, fake_fetch: list[dict], capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["octocat", "--from", "2024-01-01", "--to", "2024-01-07", "--format", "matrix"])

        assert json.loads(capsys.readouterr().out) == [[0, 3, 0, 0, 0, 0, 0]]

    def test_json_format(
        self, fake_fetch: list[dict], capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["octocat", "--from", "2024-01-01", "--to", "2024-01-07", "--format", "json"])

        payload = json.loads(capsys.readouterr().out)
        assert payload["username"] == "octocat"
        assert payload["total"] == 3
        assert payload["weeks"] == [{"year": 2024, "week": 1, "days": {"tuesday": 3}}]

    def test_writes_output_file_with_static_code(
        self, fake_fetch: list[dict], tmp_path: Path
    ) -> None:
        model = tmp_path / "trophy.scad"
        model.write_text("trophy(rawActivity);\n", encoding="utf-8")
        output = tmp_path / "activity-data.scad"

        code = main(
            [
                "octocat",
                "--from", "2024-01-01",
                "--to", "2024-01-07",
                "--static-code", str(model),
                "-o", str(output),
            ]
        )

        assert code == 0
        assert output.read_text(encoding="utf-8").endswith("\ntrophy(rawActivity);\n")

    def test_reversed_range_exits_2_without_request(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def fail_fetch(**kwargs):
            raise AssertionError("no request expected")

        monkeypatch.setattr(
            "activity3d.services.activity_service.fetch_contribution_days", fail_fetch
        )

        code = main(["octocat", "--from", "2024-02-01", "--to", "2024-01-01"])

        assert code == 2
        assert "ends before it starts" in capsys.readouterr().err

    def test_remote_error_exits_1(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def fake_fetch_activity(username, date_range, token=None, settings=None):
            raise RemoteApiError("GitHub returned HTTP 401", status_code=401, body="Bad credentials")

        monkeypatch.setattr("activity3d.cli.fetch_activity", fake_fetch_activity)

        code = main(["octocat"])

        err = capsys.readouterr().err
        assert code == 1
        assert "HTTP 401" in err
        assert "Bad credentials" in err

    def test_parse_error_exits_1(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def fake_fetch_activity(username, date_range, token=None, settings=None):
            raise ResponseParseError("data.user is missing or not an object")

        monkeypatch.setattr("activity3d.cli.fetch_activity", fake_fetch_activity)

        assert main(["octocat"]) == 1
        assert "data.user" in capsys.readouterr().err

    def test_missing_static_code_exits_2_without_request(
        self, fake_fetch: list[dict], tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        missing = tmp_path / "nope.scad"

        code = main(
            ["octocat", "--from", "2024-01-01", "--to", "2024-01-07", "--static-code", str(missing)]
        )

        assert code == 2
        assert "nope.scad" in capsys.readouterr().err
        assert fake_fetch == []

    def test_unwritable_output_exits_2(
        self, fake_fetch: list[dict], tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = tmp_path / "missing-dir" / "activity-data.scad"

        code = main(["octocat", "--from", "2024-01-01", "--to", "2024-01-07", "-o", str(output)])

        assert code == 2
        assert "activity3d: error:" in capsys.readouterr().err
        assert not output.exists()

    def test_days_with_explicit_range_exits_2(
        self, fake_fetch: list[dict], capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = main(["octocat", "--days", "30", "--from", "2024-01-01", "--to", "2024-01-31"])

        assert code == 2
        assert "--days cannot be combined" in capsys.readouterr().err
        assert fake_fetch == []
