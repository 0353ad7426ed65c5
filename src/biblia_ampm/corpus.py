"""Ordered corpora (books of chapters, flat cycles) and the bundled canon."""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from biblia_ampm.errors import ImportFormatError

CONTENT_DIR = Path(__file__).parent / "content"


@dataclass(frozen=True)
class Book:
    name: str
    chapters: int

    def __post_init__(self):
        if self.chapters < 1:
            raise ValueError(f"{self.name} must have at least one chapter, got {self.chapters}")


@dataclass(frozen=True)
class Corpus:
    """An immutable, ordered sequence of books."""

    name: str
    books: tuple[Book, ...]

    @classmethod
    def from_books(cls, name: str, books) -> "Corpus":
        return cls(name, tuple(b if isinstance(b, Book) else Book(*b) for b in books))

    @classmethod
    def cycle(cls, name: str, length: int) -> "Corpus":
        """A flat 1..length range, e.g. the 150 Psalms."""
        return cls(name, (Book(name, length),))

    @property
    def total_items(self) -> int:
        return sum(b.chapters for b in self.books)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        for book in self.books:
            for chapter in range(1, book.chapters + 1):
                yield book.name, chapter

    def __len__(self) -> int:
        return self.total_items


@dataclass(frozen=True)
class Canon:
    old_testament: Corpus
    new_testament: Corpus
    psalms: Corpus
    proverbs: Corpus


def canon_from_dict(data: dict) -> Canon:
    """Build a Canon from ``{"streams": {...}, "cycles": {...}}`` data."""
    try:
        streams = data["streams"]
        cycles = data["cycles"]
        ot = Corpus.from_books(
            "old_testament", [(b["name"], int(b["chapters"])) for b in streams["old_testament"]]
        )
        nt = Corpus.from_books(
            "new_testament", [(b["name"], int(b["chapters"])) for b in streams["new_testament"]]
        )
        psalms = Corpus.cycle(cycles["psalms"]["name"], int(cycles["psalms"]["length"]))
        proverbs = Corpus.cycle(cycles["proverbs"]["name"], int(cycles["proverbs"]["length"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ImportFormatError(f"Invalid canon definition: {e}") from e
    return Canon(ot, nt, psalms, proverbs)


def default_canon() -> Canon:
    """Load the canon shipped in content/canon.json."""
    data = json.loads((CONTENT_DIR / "canon.json").read_text(encoding="utf-8"))
    return canon_from_dict(data)
