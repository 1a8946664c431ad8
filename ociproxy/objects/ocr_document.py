from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Word:
    """
    A single recognised word anchored at the first vertex of its bounding polygon.

    Attributes:
        text (str): The recognised text.
        x (float): Normalised horizontal position in [0, 1].
        y (float): Normalised vertical position in [0, 1], lower values are higher on the page.
    """
    text: str
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Page:
    words: Tuple[Word, ...] = ()
    page_number: int = 1
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Document:
    pages: Tuple[Page, ...] = ()


@dataclass
class LineRow:
    """Words whose y-coordinate rounds to the same bucket key."""
    key: str
    words: List[Word] = field(default_factory=list)

    @property
    def y(self) -> float:
        return float(self.key)

    @property
    def text(self) -> str:
        return " ".join(word.text for word in self.words)
