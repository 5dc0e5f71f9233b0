"""Tests for roster loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dance_floor import roster
from dance_floor.models import DancerRow


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("lead", "lead"),
        (" Follow ", "follow"),
        ("both", "both"),
        ("리더", "lead"),
        ("팔로워", "follow"),
        ("Leader / Follower", "both"),
        ("둘다", "both"),
        ("???", "unknown"),
        ("", "unknown"),
        (None, "unknown"),
    ],
)
def test_classify_role_text(text, expected) -> None:
    assert roster.classify_role_text(text) == expected


def test_parse_timestamp_variants() -> None:
    assert roster.parse_timestamp(None) is None
    assert roster.parse_timestamp("") is None
    assert roster.parse_timestamp(True) is None
    assert roster.parse_timestamp(1700000000000) == 1700000000000
    assert roster.parse_timestamp("1700000000000") == 1700000000000
    assert roster.parse_timestamp("2024-05-01T19:30:00Z") == 1714591800000
    assert roster.parse_timestamp("2024-05-01T19:30:00") == 1714591800000
    assert roster.parse_timestamp("not a date") is None


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "NaN"])
def test_parse_timestamp_rejects_non_finite(value) -> None:
    assert roster.parse_timestamp(value) is None


def test_parse_paid() -> None:
    assert roster.parse_paid(None) is None
    assert roster.parse_paid("") is None
    assert roster.parse_paid(True) is True
    assert roster.parse_paid("Yes") is True
    assert roster.parse_paid("입금완료") is True
    assert roster.parse_paid("no") is False


def test_dancers_from_rows_detects_columns() -> None:
    headers = ["Timestamp", "닉네임", "역할", "한마디", "입금여부"]
    rows = [
        {"Timestamp": "1000", "닉네임": "민지", "역할": "리더", "한마디": "hi", "입금여부": "네"},
        {"Timestamp": "", "닉네임": "  ", "역할": "팔로워", "한마디": "", "입금여부": ""},
        {"Timestamp": "2000", "닉네임": "Sam", "역할": "follow", "한마디": "", "입금여부": "no"},
    ]
    dancers = roster.dancers_from_rows(headers, rows)
    assert dancers == [
        DancerRow("민지", "lead", ts=1000, wish="hi", paid=True),
        DancerRow("Sam", "follow", ts=2000, wish=None, paid=False),
    ]


def test_dancers_from_rows_requires_name_and_role() -> None:
    with pytest.raises(roster.RosterError):
        roster.dancers_from_rows(["name", "email"], [])


def test_load_csv(tmp_path: Path) -> None:
    path = tmp_path / "social.csv"
    path.write_text(
        "\ufeffName,Role,Message\nAmy,lead,see you\nBo,follow,\n",
        encoding="utf-8",
    )
    dancers = roster.load_roster(path)
    assert [dancer.name for dancer in dancers] == ["Amy", "Bo"]
    assert dancers[0].wish == "see you"
    assert dancers[1].role == "follow"


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "social.json"
    path.write_text(
        json.dumps(
            [
                {"name": "Amy", "role": "lead", "ts": 5, "paid": True},
                {"name": "Bo", "role": "both", "wish": "hello"},
                {"role": "follow"},
                "junk",
            ]
        ),
        encoding="utf-8",
    )
    dancers = roster.load_roster(path)
    assert dancers == [
        DancerRow("Amy", "lead", ts=5, paid=True),
        DancerRow("Bo", "both", wish="hello"),
    ]


def test_load_json_non_finite_timestamps_are_unknown(tmp_path: Path) -> None:
    path = tmp_path / "odd.json"
    path.write_text(
        '[{"name": "Amy", "role": "lead", "ts": NaN},'
        ' {"name": "Bo", "role": "follow", "ts": -Infinity}]',
        encoding="utf-8",
    )
    dancers = roster.load_roster(path)
    assert dancers == [DancerRow("Amy", "lead"), DancerRow("Bo", "follow")]


def test_load_json_rejects_bad_content(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    with pytest.raises(roster.RosterError):
        roster.load_roster(bad)
    not_list = tmp_path / "obj.json"
    not_list.write_text("{}", encoding="utf-8")
    with pytest.raises(roster.RosterError):
        roster.load_roster(not_list)


def test_load_roster_rejects_unknown_extension(tmp_path: Path) -> None:
    path = tmp_path / "roster.txt"
    path.write_text("x", encoding="utf-8")
    with pytest.raises(roster.RosterError, match="Unsupported"):
        roster.load_roster(path)


def test_load_roster_missing_file(tmp_path: Path) -> None:
    with pytest.raises(roster.RosterError, match="not found"):
        roster.load_roster(tmp_path / "missing.csv")


def test_first_signup_ts() -> None:
    assert roster.first_signup_ts([]) is None
    dancers = [DancerRow("a", ts=30), DancerRow("b"), DancerRow("c", ts=20)]
    assert roster.first_signup_ts(dancers) == 20
