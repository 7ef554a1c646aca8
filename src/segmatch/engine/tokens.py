"""Quote-aware word splitting for text blobs."""
from __future__ import annotations

QUOTES = ("'", '"')
SEPARATOR = " "


class Word:
    __slots__ = ("value", "raw")

    def __init__(self, value: str, raw: str) -> None:
        self.value = value
        self.raw = raw

    @property
    def quoted(self) -> bool:
        return self.value != self.raw.lstrip(SEPARATOR)

    def __repr__(self) -> str:  # pragma: no cover - debug convenience
        return f"Word({self.value!r}, raw={self.raw!r})"


def _unquote(word: str) -> str:
    if len(word) >= 2 and word[0] in QUOTES and word[-1] == word[0]:
        return word[1:-1]
    return word


def split_first_word(text: str) -> tuple[Word, str]:
    """Split the first word off ``text``.

    Leading separators belong to the word's raw text. A word that opens with
    a quote runs to the matching closing quote, so separators inside it do
    not split; the other quote character is plain text inside it. The tail
    keeps its leading separator.

    Examples:
        >>> word, tail = split_first_word('"a b" c')
        >>> word.value, tail
        ('a b', ' c')
        >>> word, tail = split_first_word("it's fine")
        >>> word.value, tail
        ("it's", ' fine')
    """
    start = 0
    while start < len(text) and text[start] == SEPARATOR:
        start += 1
    active: str | None = None
    end = start
    while end < len(text):
        ch = text[end]
        if active is not None:
            if ch == active:
                active = None
        elif end == start and ch in QUOTES:
            active = ch
        elif ch == SEPARATOR:
            break
        end += 1
    raw = text[:end]
    return Word(_unquote(text[start:end]), raw), text[end:]


def split_words(text: str) -> list[str]:
    """Split ``text`` into unquoted words.

    Examples:
        >>> split_words('add "milk and eggs" \\'to "the" list\\'')
        ['add', 'milk and eggs', 'to "the" list']
    """
    words: list[str] = []
    rest = text
    while rest.strip(SEPARATOR):
        word, rest = split_first_word(rest)
        words.append(word.value)
    return words
