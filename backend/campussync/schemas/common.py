from __future__ import annotations

import re

# Accepts an unpadded hour ("9:05"); stored values are always zero-padded.
TIME_INPUT_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def normalize_time(value: str) -> str:
    match = TIME_INPUT_PATTERN.match(value.strip())
    if match is None:
        raise ValueError("Invalid time format. Use HH:MM")
    hours, minutes = match.groups()
    return f"{int(hours):02d}:{minutes}"


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def strip_required(value: str, message: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(message)
    return trimmed


def strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None
