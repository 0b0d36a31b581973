"""Validation of data stream names.

Mirrors the rules Elasticsearch applies when creating a data stream, so a bad
name is reported at configuration time instead of by the cluster.
"""
from typing import Callable, List, Optional, Tuple

from datastream_errors import (
    ConfigError,
    InvalidCase,
    InvalidCharacters,
    InvalidStart,
    InvalidType,
    MissingParameter,
    ReservedName,
    TooLong,
)

PARAMETER = "data_stream_name"
INVALID_CHARACTERS = ("\\", "/", "*", "?", "\"", "<", ">", "|", " ", ",", "#", ":")
INVALID_START_CHARACTERS = ("-", "_", "+", ".")
RESERVED_NAMES = (".", "..")
MAX_NAME_BYTES = 255


class DataStreamName(str):
    """A name that passed validate_data_stream_name()."""

    __slots__ = ()


def _has_uppercase(name: str) -> bool:
    return name != name.lower()


def _has_invalid_characters(name: str) -> bool:
    return any(c in name for c in INVALID_CHARACTERS)


def _has_invalid_start(name: str) -> bool:
    # "." and ".." get the more specific reserved-name message
    return name.startswith(INVALID_START_CHARACTERS) and name not in RESERVED_NAMES


def _is_reserved(name: str) -> bool:
    return name in RESERVED_NAMES


def _is_too_long(name: str) -> bool:
    return len(name.encode("utf-8")) > MAX_NAME_BYTES


# Evaluated in order, the first matching rule wins.
RULES: List[Tuple[Callable[[str], bool], Callable[[str], ConfigError]]] = [
    (_has_uppercase, InvalidCase),
    (_has_invalid_characters, lambda name: InvalidCharacters(name, INVALID_CHARACTERS)),
    (_has_invalid_start, lambda name: InvalidStart(name, INVALID_START_CHARACTERS)),
    (_is_reserved, ReservedName),
    (_is_too_long, lambda name: TooLong(name, MAX_NAME_BYTES)),
]


def check_data_stream_name(candidate: Optional[str]) -> Optional[ConfigError]:
    """Return the first rule violation for ``candidate``, or None when it is valid."""
    if not candidate:
        return MissingParameter(PARAMETER)
    if not isinstance(candidate, str):
        return InvalidType(candidate, PARAMETER)
    for violates, error in RULES:
        if violates(candidate):
            return error(candidate)
    return None


def validate_data_stream_name(candidate: Optional[str]) -> DataStreamName:
    error = check_data_stream_name(candidate)
    if error is not None:
        raise error
    return DataStreamName(candidate)
