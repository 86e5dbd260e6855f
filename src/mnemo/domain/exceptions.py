"""Exceptions raised by the mnemo engine and its adapters."""

from typing import Any


class MnemoError(Exception):
    """Base class for every mnemo error."""


class InvalidQuality(MnemoError, ValueError):
    """An unrecognized quality rating reached the scheduler."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Unrecognized quality rating {value!r}; expected one of again, hard, good, easy"
        )


class JudgeError(MnemoError):
    """The semantic judge could not produce a usable verdict."""
