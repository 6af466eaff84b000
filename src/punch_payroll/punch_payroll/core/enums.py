from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Kind of punch emitted by the clock device."""

    CLOCK_IN = "ClockIn"
    CLOCK_OUT = "ClockOut"
    BREAK_IN = "BreakIn"
    BREAK_OUT = "BreakOut"

    @classmethod
    def from_device_code(cls, code: int) -> "PunchType":
        """Map the device attendance code (1=in, 2=out, 3=break in, 4=break out)."""
        try:
            return _DEVICE_CODES[int(code)]
        except KeyError:
            raise ValueError(f"Unknown device punch code: {code!r}") from None

    @classmethod
    def parse(cls, value: str | int) -> "PunchType":
        """Accept an enum value (``ClockIn``), a name (``CLOCK_IN``) or a device code."""
        if isinstance(value, int):
            return cls.from_device_code(value)

        text = str(value).strip()
        if text.isdigit():
            return cls.from_device_code(int(text))
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValueError(f"Unknown punch type: {value!r}")


_DEVICE_CODES = {
    1: PunchType.CLOCK_IN,
    2: PunchType.CLOCK_OUT,
    3: PunchType.BREAK_IN,
    4: PunchType.BREAK_OUT,
}


class SessionState(str, Enum):
    """Reconciliation state of a single employee day."""

    PARTIAL = "PARTIAL"
    COMPLETE = "COMPLETE"
    PROCESSED = "PROCESSED"


class SkipReason(str, Enum):
    """Why a day was not written during a batch."""

    NO_PAY_PROFILE = "NO_PAY_PROFILE"
    INVALID_PAY_PROFILE = "INVALID_PAY_PROFILE"
