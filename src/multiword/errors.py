"""Error taxonomy for the multi-word integer engine."""

from __future__ import annotations


class MultiwordError(Exception):
    """Base error for Integer/Fixed64/Word64 operations."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class DivisionByZero(MultiwordError, ZeroDivisionError):
    """quot/rem/div/mod called with a zero divisor."""

    def __init__(self, msg: str = "division by zero"):
        super().__init__(msg)


class FormatError(MultiwordError, ValueError):
    """A string could not be parsed as an integer in the requested radix."""

    def __init__(self, msg: str, text: str | None = None):
        if text is None:
            super().__init__(msg)
        else:
            super().__init__(f"{msg}: {text!r}")
        self.msg = msg
        self.text = text
