"""Case-insensitive literal search over the document text."""

from typing import Optional


def fold_case(text: str) -> str:
    """Lowercase ``text`` one character at a time.

    Characters whose lowercase form has a different length (e.g. U+0130)
    are kept unchanged, so offsets into the result are offsets into
    ``text``.
    """
    return "".join(c if len(c.lower()) != 1 else c.lower() for c in text)


class SearchEngine:
    def __init__(self):
        self._query = ""
        self._folded = ""

    @property
    def query(self) -> str:
        return self._query

    def set_query(self, query: str):
        self._query = query
        self._folded = fold_case(query)

    def clear(self):
        self.set_query("")

    def is_active(self) -> bool:
        return bool(self._query)

    def all_matches(self, content: str) -> list[tuple[int, int]]:
        """All non-overlapping matches as ``(start, end)`` character spans."""
        if not self._folded:
            return []
        text = fold_case(content)
        size = len(self._folded)
        matches = []
        pos = text.find(self._folded)
        while pos != -1:
            matches.append((pos, pos + size))
            pos = text.find(self._folded, pos + size)
        return matches

    def find_next(self, content: str, from_char: int) -> Optional[tuple[int, int]]:
        """First match starting at or after ``from_char``, wrapping around.

        Returns the match as a ``(start, end)`` character span.
        """
        if not self._folded:
            return None
        text = fold_case(content)
        pos = text.find(self._folded, from_char)
        if pos == -1:
            pos = text.find(self._folded)
        return self._span(pos)

    def find_prev(self, content: str, from_char: int) -> Optional[tuple[int, int]]:
        """Last match starting before ``from_char``, wrapping around."""
        if not self._folded:
            return None
        text = fold_case(content)
        pos = -1
        if from_char > 0:
            pos = text.rfind(self._folded, 0, from_char - 1 + len(self._folded))
        if pos == -1:
            pos = text.rfind(self._folded)
        return self._span(pos)

    def _span(self, pos: int) -> Optional[tuple[int, int]]:
        if pos == -1:
            return None
        return pos, pos + len(self._folded)
