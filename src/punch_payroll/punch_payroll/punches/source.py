from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Protocol, Sequence

from ..core.constants import DEFAULT_DEVICE_ID
from ..core.enums import PunchType
from ..core.exceptions import UpstreamUnavailableError, ValidationError
from .model import RawPunch


class PunchSource(Protocol):
    def fetch(self) -> Sequence[RawPunch]:
        raise NotImplementedError


class CsvPunchSource(PunchSource):
    """Device log export: ``device_user_id,timestamp,punch_type[,device_id]``.

    ``timestamp`` is ISO 8601 (with or without offset); ``punch_type`` is a name,
    value or device code 1..4.
    """

    REQUIRED_COLUMNS = ("device_user_id", "timestamp", "punch_type")

    def __init__(self, path: str | Path, *, default_device_id: str = DEFAULT_DEVICE_ID):
        self._path = Path(path)
        self._default_device_id = default_device_id

    def fetch(self) -> Sequence[RawPunch]:
        try:
            with self._path.open(newline="", encoding="utf-8") as f:
                return self._parse(csv.DictReader(f))
        except OSError as exc:
            raise UpstreamUnavailableError(f"Cannot read punch export {self._path}: {exc}") from exc

    def _parse(self, reader: csv.DictReader) -> list[RawPunch]:
        missing = [c for c in self.REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValidationError(f"{self._path}: missing columns {', '.join(missing)}")

        punches: list[RawPunch] = []
        # Line 1 is the header.
        for line_no, row in enumerate(reader, start=2):
            device_user_id = (row.get("device_user_id") or "").strip()
            if not device_user_id:
                raise ValidationError(f"{self._path}:{line_no}: device_user_id is empty")
            try:
                timestamp = datetime.fromisoformat((row.get("timestamp") or "").strip())
                punch_type = PunchType.parse(row.get("punch_type") or "")
            except ValueError as exc:
                raise ValidationError(f"{self._path}:{line_no}: {exc}") from exc

            punches.append(
                RawPunch(
                    device_user_id=device_user_id,
                    timestamp=timestamp,
                    punch_type=punch_type,
                    device_id=(row.get("device_id") or "").strip() or self._default_device_id,
                )
            )
        return punches
