import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from ociproxy.objects.ocr_document import Document, Page, Word


def _coordinate(value: Any) -> float:
    # missing or malformed geometry falls back to 0 instead of failing the page
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


class OCRDocumentReader:
    """
    Turns an OCI Document Understanding response into an immutable `Document`.

    Only `pages[].words[]` is read. Each word is anchored at the first vertex of its
    `boundingPolygon.normalizedVertices`; any missing piece of geometry defaults to 0.
    """

    def __init__(self, data: Optional[Dict[str, Any]]):
        """
        Initialise the reader with an already-parsed OCR response.

        Args:
            data (Optional[Dict[str, Any]]): Parsed OCR response; None or non-dict yields an empty document.
        """
        self.data = data if isinstance(data, dict) else {}

    @classmethod
    def from_file(cls, filepath: str) -> "OCRDocumentReader":
        """
        Load an OCR response saved as JSON.

        Args:
            filepath (str): Path to the JSON file.

        Raises:
            FileNotFoundError: If the given file path does not exist.
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File does not exist: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return cls(json.load(f))

    def has_pages(self) -> bool:
        return bool(self.data.get("pages"))

    def get_document(self) -> Document:
        """
        Build the document, keeping page and word order as returned by the OCR engine.

        Returns:
            Document: One `Page` per entry in `pages`, possibly with no words.
        """
        pages = []
        for index, page in enumerate(_as_list(self.data.get("pages")), start=1):
            if not isinstance(page, dict):
                continue
            dimensions = _as_dict(page.get("dimensions"))
            pages.append(Page(
                words=tuple(self._read_words(_as_list(page.get("words")))),
                page_number=page.get("pageNumber") or index,
                width=_coordinate(dimensions.get("width")),
                height=_coordinate(dimensions.get("height")),
            ))
        return Document(pages=tuple(pages))

    @staticmethod
    def _read_words(words: List[Any]) -> List[Word]:
        result = []
        for word in words:
            if not isinstance(word, dict):
                continue
            vertices = _as_list(_as_dict(word.get("boundingPolygon")).get("normalizedVertices"))
            anchor = _as_dict(vertices[0]) if vertices else {}
            text = word.get("text")
            result.append(Word(
                text="" if text is None else str(text),
                x=_coordinate(anchor.get("x")),
                y=_coordinate(anchor.get("y")),
            ))
        return result
