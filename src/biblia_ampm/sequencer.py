"""Spread ordered corpora across calendar slots."""
import math
from dataclasses import dataclass
from fractions import Fraction

from biblia_ampm.corpus import Corpus

SEPARATOR = "; "


@dataclass
class _Cursor:
    book_index: int = 0
    position: int = 1
    carry: Fraction = Fraction(0)

    def exhausted(self, corpus: Corpus) -> bool:
        return self.book_index >= len(corpus.books)

    def take(self, corpus: Corpus) -> str:
        book = corpus.books[self.book_index]
        ref = f"{book.name} {self.position}"
        self.position += 1
        if self.position > book.chapters:
            self.position = 1
            self.book_index += 1
        return ref


def sequence(corpus: Corpus, total_slots: int) -> dict[int, str]:
    """Assign consecutive chapters of ``corpus`` to slots 1..total_slots.

    Each slot receives ``floor(carry + rate)`` chapters, where
    ``rate = total_items / total_slots`` and the fractional part is carried
    to the next slot. The carry is an exact Fraction, so the corpus is
    consumed exactly once over all slots.

    Args:
        corpus: The corpus to walk from its first to its last chapter.
        total_slots: Number of slots (days) to fill.

    Returns:
        Dict mapping slot number to a reference string such as
        ``"Gênesis 1; Gênesis 2"``. Slots that receive nothing map to "".
    """
    if total_slots < 1:
        raise ValueError(f"total_slots must be positive, got {total_slots}")
    rate = Fraction(corpus.total_items, total_slots)
    cursor = _Cursor()
    plan = {}
    for slot in range(1, total_slots + 1):
        cursor.carry += rate
        count = math.floor(cursor.carry)
        cursor.carry -= count
        refs = []
        for _ in range(count):
            if cursor.exhausted(corpus):
                break
            refs.append(cursor.take(corpus))
        plan[slot] = SEPARATOR.join(refs)
    return plan


def cyclic_item(cycle_length: int, slot: int) -> int:
    """Return the 1-based item for ``slot`` in a cycle that restarts after ``cycle_length``."""
    if cycle_length < 1:
        raise ValueError(f"cycle_length must be positive, got {cycle_length}")
    if slot < 1:
        raise ValueError(f"slot must be positive, got {slot}")
    return (slot - 1) % cycle_length + 1


def cyclic_reference(name: str, cycle_length: int, slot: int) -> str:
    return f"{name} {cyclic_item(cycle_length, slot)}"
