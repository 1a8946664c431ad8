from typing import Dict, List

from ociproxy.objects.ocr_document import Document, LineRow, Page

# Words whose y differs by less than half a unit in the last kept decimal share a line.
# Tuning constant, not derived from anything; calibrate against real OCR geometry.
DEFAULT_Y_PRECISION = 2


class LineReconstructor:
    """
    Rebuilds reading-order text lines from OCR words that come back unordered.

    Words are bucketed into rows by their y-coordinate rounded to `precision` decimals,
    rows are read top to bottom and words within a row left to right.

    Attributes:
        precision (int): Decimal places used to quantise y into row buckets.
    """

    def __init__(self, precision: int = DEFAULT_Y_PRECISION):
        self.precision = precision

    def row_key(self, y: float) -> str:
        return f"{y:.{self.precision}f}"

    def group_rows(self, page: Page) -> List[LineRow]:
        """
        Group a page's words into rows, sorted top to bottom with words sorted left to right.

        Args:
            page (Page): The page to group.

        Returns:
            List[LineRow]: Ordered rows; empty if the page has no words.
        """
        rows: Dict[str, LineRow] = {}
        for word in page.words:
            key = self.row_key(word.y)
            rows.setdefault(key, LineRow(key=key)).words.append(word)

        ordered = sorted(rows.values(), key=lambda row: row.y)
        for row in ordered:
            row.words.sort(key=lambda w: w.x)
        return ordered

    def reconstruct_page(self, page: Page) -> List[str]:
        return [row.text for row in self.group_rows(page)]

    def reconstruct(self, doc: Document) -> str:
        """
        Flatten a document into newline-separated lines, page by page.

        Args:
            doc (Document): Parsed OCR document.

        Returns:
            str: The reconstructed text, or an empty string when there are no words.
        """
        lines = []
        for page in doc.pages:
            lines.extend(self.reconstruct_page(page))
        return "\n".join(lines)
