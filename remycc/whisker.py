"""Congestion-control rules that map a region of memory to a sending action."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Iterable

from remycc.memory import MemoryRange

MAX_WINDOW = 1_000_000


@dataclass
class Whisker:
    """A single rule: inside ``domain``, adjust the window and pace sends."""

    generation: int
    window_increment: int
    window_multiple: float
    intersend: float
    domain: MemoryRange

    def window(self, prev_window: int) -> int:
        """Return the new congestion window derived from ``prev_window``."""
        proposed = prev_window * self.window_multiple + self.window_increment
        return int(max(0.0, min(proposed, float(MAX_WINDOW))))

    def __str__(self) -> str:
        return (f"Generation={self.generation}, WindowIncrement={self.window_increment}, "
                f"WindowMultiple={self.window_multiple:f}, Intersend={self.intersend:f}, "
                f"Domain={self.domain}")


def generate_whiskers(
    generations: int,
    window_increments: Iterable[int],
    window_multiples: Iterable[float],
    intersends: Iterable[float],
    domains: Iterable[MemoryRange],
) -> list[Whisker]:
    """Build one whisker per generation and per combination of the given settings.

    Generations vary slowest, then window increments, window multiples,
    intersend times and finally domains.
    """
    increments = tuple(window_increments)
    multiples = tuple(window_multiples)
    sends = tuple(intersends)
    ranges = tuple(domains)
    return [
        Whisker(generation, int(increment), float(multiple), float(intersend),
                MemoryRange(domain.lower, domain.upper))
        for generation, increment, multiple, intersend, domain
        in product(range(max(generations, 0)), increments, multiples, sends, ranges)
    ]