"""Banned-term matching for comment moderation.

Terms are stored in a character trie so one pass over the text finds every
occurrence, whatever the size of the list. Matching is case-insensitive and
substring based: "Shitake" matches the term "shit". At each position the
longest term wins.

Pure: no I/O and no logging.
"""

from collections.abc import Iterable


# Key marking the end of a term. Never a valid single character.
_END = ""

DEFAULT_MASK = "*"


def parse_words(words: str, separator: str = "|") -> list[str]:
    """Split a configured word list such as ``"foo|bar baz|qux"``."""
    return [word.strip() for word in words.split(separator) if word.strip()]


class WordFilter:
    """Case-insensitive banned-term detector and masker."""

    def __init__(self, words: Iterable[str]) -> None:
        self._root: dict[str, dict] = {}
        for word in words:
            term = word.strip()
            if not term:
                continue
            node = self._root
            for char in term:
                node = node.setdefault(char.lower(), {})
            node[_END] = {}

    def __bool__(self) -> bool:
        return bool(self._root)

    def _match_length(self, chars: list[str], start: int) -> int:
        """Length of the longest term starting at ``start`` (0 if none)."""
        node = self._root
        longest = 0
        for index in range(start, len(chars)):
            node = node.get(chars[index])
            if node is None:
                break
            if _END in node:
                longest = index - start + 1
        return longest

    def contains_any_word(self, text: str) -> bool:
        """Check whether ``text`` contains at least one banned term."""
        if not self._root or not text:
            return False
        chars = [char.lower() for char in text]
        return any(self._match_length(chars, start) for start in range(len(chars)))

    def filter_content(self, text: str, mask: str = DEFAULT_MASK) -> str:
        """Replace every character of each banned occurrence with ``mask``.

        Raises:
            ValueError: If ``mask`` is not a single character
        """
        if len(mask) != 1:
            msg = "mask must be a single character"
            raise ValueError(msg)
        if not self._root or not text:
            return text

        chars = [char.lower() for char in text]
        output = list(text)
        start = 0
        while start < len(chars):
            length = self._match_length(chars, start)
            if length:
                output[start : start + length] = [mask] * length
                start += length
            else:
                start += 1
        return "".join(output)
