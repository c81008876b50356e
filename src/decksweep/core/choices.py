"""Operator interaction boundary.

Resolvers never read input themselves.  They hand a question and a list
of options to an :class:`Operator` and decode the raw answer with
:func:`decode_choice`.  Options are numbered from 1; ``0`` always means
skip.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class Choice(enum.Enum):
    SKIP = "skip"
    INVALID = "invalid"


def decode_choice(raw: str, count: int) -> int | Choice:
    """Turn an operator answer into a zero-based option index.

    Returns ``Choice.SKIP`` for ``0`` and ``Choice.INVALID`` for anything
    that is not a number in ``0..count``.
    """
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        return Choice.INVALID
    number = int(text)
    if number == 0:
        return Choice.SKIP
    if number > count:
        return Choice.INVALID
    return number - 1


class Operator(ABC):
    """Someone (or something) answering deletion prompts."""

    @abstractmethod
    def choose(self, question: str, options: list[str]) -> str:
        """Present *options* as ``1..n`` plus ``0 = Skip`` and return the raw answer."""
