"""Roster file loading (CSV/JSON) and role-text classification."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
import json
import logging
import math
from pathlib import Path
import re
from typing import Any, Iterable, Optional, Sequence

from dance_floor.models import ROLES, DancerRow, Role

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".csv", ".json"}

# Column header patterns.
REGEX_NAME = re.compile(r"name|닉네임", re.IGNORECASE)
REGEX_ROLE = re.compile(r"role|역할|리드|리더", re.IGNORECASE)
REGEX_WISH = re.compile(r"말씀|한마디|wish|message", re.IGNORECASE)
REGEX_PAID = re.compile(r"입금여|입금확|paid", re.IGNORECASE)
REGEX_TIMESTAMP = re.compile(r"timestamp|타임스탬프|time", re.IGNORECASE)

# Role cell patterns.
REGEX_LEADER = re.compile(r"lead|리더|리드", re.IGNORECASE)
REGEX_FOLLOW = re.compile(r"follow|팔뤄|팔로우|팔로워", re.IGNORECASE)

_BOTH_TOKENS = {"both", "b", "lf", "fl", "양쪽", "둘다"}
_PAID_TOKENS = {"yes", "y", "true", "1", "o", "paid", "완료", "입금완료", "네"}


class RosterError(ValueError):
    """Raised when a roster file cannot be turned into dancers."""


def classify_role_text(text: object) -> Role:
    """Map a free-text role cell to a role."""
    if not isinstance(text, str):
        return "unknown"
    value = text.strip()
    if value.lower() in ROLES:
        return value.lower()  # type: ignore[return-value]
    if value.lower() in _BOTH_TOKENS:
        return "both"
    is_leader = bool(REGEX_LEADER.search(value))
    is_follower = bool(REGEX_FOLLOW.search(value))
    if is_leader and is_follower:
        return "both"
    if is_leader:
        return "lead"
    if is_follower:
        return "follow"
    return "unknown"


def parse_timestamp(value: object) -> Optional[int]:
    """Return a signup instant as epoch milliseconds, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.lstrip("-").isdigit():
        return int(text)
    try:
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp %r", text)
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def parse_paid(value: object) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    return text in _PAID_TOKENS


def _clean_text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _find_column(headers: Sequence[str], pattern: re.Pattern[str]) -> Optional[str]:
    for header in headers:
        if header and pattern.search(header):
            return header
    return None


def _dancer_from_mapping(
    row: dict[str, Any],
    *,
    name_key: str,
    role_key: str,
    ts_key: Optional[str],
    wish_key: Optional[str],
    paid_key: Optional[str],
) -> Optional[DancerRow]:
    name = _clean_text(row.get(name_key))
    if not name:
        return None
    return DancerRow(
        name=name,
        role=classify_role_text(row.get(role_key)),
        ts=parse_timestamp(row.get(ts_key)) if ts_key else None,
        wish=_clean_text(row.get(wish_key)) if wish_key else None,
        paid=parse_paid(row.get(paid_key)) if paid_key else None,
    )


def dancers_from_rows(
    headers: Sequence[str], rows: Iterable[dict[str, Any]]
) -> list[DancerRow]:
    """Build dancers from tabular rows by detecting the relevant columns."""
    name_key = _find_column(headers, REGEX_NAME)
    role_key = _find_column(headers, REGEX_ROLE)
    if name_key is None or role_key is None:
        raise RosterError("Roster needs a name column and a role column")
    kwargs = {
        "name_key": name_key,
        "role_key": role_key,
        "ts_key": _find_column(headers, REGEX_TIMESTAMP),
        "wish_key": _find_column(headers, REGEX_WISH),
        "paid_key": _find_column(headers, REGEX_PAID),
    }
    dancers: list[DancerRow] = []
    for row in rows:
        dancer = _dancer_from_mapping(row, **kwargs)
        if dancer is not None:
            dancers.append(dancer)
    return dancers


def _load_csv(path: Path) -> list[DancerRow]:
    with path.open(encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        headers = list(reader.fieldnames or [])
        return dancers_from_rows(headers, reader)


def _load_json(path: Path) -> list[DancerRow]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RosterError(f"Invalid JSON roster {path}: {exc}") from exc
    if not isinstance(raw, list):
        raise RosterError(f"JSON roster {path} must contain a list of dancers")
    dancers: list[DancerRow] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        dancer = _dancer_from_mapping(
            entry,
            name_key="name",
            role_key="role",
            ts_key="ts",
            wish_key="wish",
            paid_key="paid",
        )
        if dancer is not None:
            dancers.append(dancer)
    return dancers


def load_roster(path: Path) -> list[DancerRow]:
    """Load dancers from a CSV or JSON roster file."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise RosterError(f"Unsupported roster format: {path.name}")
    if not path.is_file():
        raise RosterError(f"Roster not found: {path}")
    if suffix == ".csv":
        dancers = _load_csv(path)
    else:
        dancers = _load_json(path)
    logger.info("Loaded %d dancers from %s", len(dancers), path)
    return dancers


def first_signup_ts(dancers: Iterable[DancerRow]) -> Optional[int]:
    stamps = [dancer.ts for dancer in dancers if dancer.ts is not None]
    return min(stamps) if stamps else None
