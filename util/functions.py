# util/functions.py
import re
from typing import Iterator, List, Sequence, TypeVar

T = TypeVar("T")

_WS = re.compile(r"\s+")


def normalize_whitespace(text: str | None) -> str:
    """Collapse internal whitespace runs to one space and trim."""
    if not text:
        return ""
    return _WS.sub(" ", text).strip()


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """
    - Partition `items` into consecutive lists of at most `size` elements.
    - Order is preserved; the last batch may be shorter.
    """
    step = max(1, int(size))
    for i in range(0, len(items), step):
        yield list(items[i : i + step])


def clip_words(text: str, max_words: int = 100) -> str:
    """
    - Trim 'text' to at most `max_words` tokens separated by whitespace.
    - Adds an ellipsis when trimming occurs.
    """
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + " …"
