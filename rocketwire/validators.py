"""Validation of client group names."""

from __future__ import annotations

import re

VALID_PATTERN = re.compile(r"^[%|a-zA-Z0-9_-]+$")
CHARACTER_MAX_LENGTH = 255


class InvalidGroupError(ValueError):
    """A group name is empty or too long."""


def validate_group(group: str) -> str:
    """Return ``group`` if it is a usable group name; raise InvalidGroupError if not."""
    if group == "":
        raise InvalidGroupError("consumerGroup is empty")
    if len(group.encode("utf-8")) > CHARACTER_MAX_LENGTH:
        raise InvalidGroupError(
            "the specified group is longer than group max length 255."
        )
    return group