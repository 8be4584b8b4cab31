"""Exception types raised by AlphaPolymer.

Parse and range errors are preconditions: nothing in the library recovers
from them, they are always surfaced to the caller.
"""

from typing import Optional


class PolymerError(Exception):
    """Base class for all AlphaPolymer errors."""


class ParseError(PolymerError, ValueError):
    """Malformed sequence or formula text.

    Attributes
    ----------
    token : str
        The offending character or annotation text
    position : int or None
        Character offset of the token in the parsed text, if known
    """

    def __init__(self, message: str, token: str = "", position: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.position = position


class RangeError(PolymerError, IndexError):
    """A residue number, bound or index outside its valid window.

    Attributes
    ----------
    value : int
        The offending value
    lower, upper : int or None
        The inclusive valid window, when one applies
    """

    def __init__(self, message: str, value: Optional[int] = None,
                 lower: Optional[int] = None, upper: Optional[int] = None):
        super().__init__(message)
        self.value = value
        self.lower = lower
        self.upper = upper
