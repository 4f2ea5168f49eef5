"""
Built-in successor functions and external generators.

Successor functions take the previously generated value and return the next
one; they are the usual block strategy for sequence attributes. Generators
expose ``next()`` and are registered with the ``class`` option.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from faker import Faker

logger = logging.getLogger(__name__)

_CARRY_RESTART = {"digit": "1", "lower": "a", "upper": "A"}


def _kind(ch: str) -> Optional[str]:
    if "0" <= ch <= "9":
        return "digit"
    if "a" <= ch <= "z":
        return "lower"
    if "A" <= ch <= "Z":
        return "upper"
    return None


def _bump(ch: str, kind: str):
    """Increment one alphanumeric character, returning (char, carried)."""
    wrap = {"digit": ("9", "0"), "lower": ("z", "a"), "upper": ("Z", "A")}[kind]
    if ch == wrap[0]:
        return wrap[1], True
    return chr(ord(ch) + 1), False


def succ(value: Any) -> Any:
    """
    Return the successor of a string or integer.

    Strings increment their rightmost alphanumeric character, carrying into
    the alphanumerics to its left; a carry out of the leftmost one prepends a
    new character of the same kind::

        succ("frobnitz") == "frobniua"
        succ("az") == "ba"
        succ("zz") == "aaa"
        succ("a9") == "b0"
        succ("1.9") == "2.0"
    """
    if isinstance(value, bool):
        raise TypeError("succ() does not apply to booleans")
    if isinstance(value, int):
        return value + 1
    if not isinstance(value, str):
        raise TypeError(f"succ() expects str or int, got {type(value).__name__}")
    if not value:
        return value

    chars = list(value)
    positions = [i for i, ch in enumerate(chars) if _kind(ch)]

    if not positions:
        chars[-1] = chr(ord(chars[-1]) + 1)
        return "".join(chars)

    for i in reversed(positions):
        kind = _kind(chars[i])
        chars[i], carried = _bump(chars[i], kind)
        if not carried:
            return "".join(chars)
        leftmost, leftmost_kind = i, kind

    chars.insert(leftmost, _CARRY_RESTART[leftmost_kind])
    return "".join(chars)


def increment(previous: Optional[int]) -> int:
    """Integer counter starting at 1."""
    return 1 if previous is None else previous + 1


SEQUENCES: Dict[str, Callable[[Any], Any]] = {
    "succ": succ,
    "increment": increment,
}


class FakerGenerator:
    """
    External generator backed by a Faker provider.

    Example:
        >>> emails = FakerGenerator("email", seed=42)
        >>> emails.next()
    """

    def __init__(
        self,
        provider: str,
        locale: Optional[str] = None,
        seed: Optional[int] = None,
        unique: bool = False,
        **kwargs: Any,
    ):
        self.provider = provider
        self.kwargs = kwargs
        self.faker = Faker(locale) if locale else Faker()
        if seed is not None:
            self.faker.seed_instance(seed)

        source = self.faker.unique if unique else self.faker
        try:
            self._method = getattr(source, provider)
        except AttributeError:
            raise ValueError(f"Unknown Faker provider: {provider}") from None

        logger.debug(f"Faker generator ready for provider {provider}")

    def next(self) -> Any:
        return self._method(**self.kwargs)

    def __repr__(self) -> str:
        return f"FakerGenerator({self.provider!r})"
