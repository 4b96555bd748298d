"""
Message tokenization.

A Delimiter splits a command message on one configured separator: a single
character, a literal string, or a compiled regular expression. Empty tokens
are kept ("a  b" split on " " is ["a", "", "b"]), and an optional limit caps
the number of tokens so that the last one carries the unsplit rest of the
message.
"""
import re

from .faults import InvalidDelimiterError


class Delimiter:
    """
    Immutable single-separator splitter.

    Parameters
    - source: str | re.Pattern
      A non-empty literal (one character or longer) or a compiled pattern.
      The pattern must not match the empty string.
    """
    __slots__ = ("_source",)

    def __init__(self, source=" ", /):
        if isinstance(source, Delimiter):
            source = source.source
        if isinstance(source, str):
            if not source:
                raise InvalidDelimiterError("delimiter cannot be an empty string")
        elif isinstance(source, re.Pattern):
            if not isinstance(source.pattern, str):
                raise InvalidDelimiterError("delimiter pattern must be a text pattern")
            if source.fullmatch(""):
                raise InvalidDelimiterError(f"delimiter pattern {source.pattern!r} matches the empty string")
        else:
            raise InvalidDelimiterError(f"delimiter must be a string or a compiled pattern, not {type(source).__name__!r}")
        object.__setattr__(self, "_source", source)

    @property
    def source(self):
        return self._source

    def split(self, text, /, limit=None):
        """
        Split text into tokens.

        limit
        - None: split on every occurrence.
        - int n >= 1: produce at most n tokens; the last token holds the rest
          of the text verbatim, separators included.
        """
        if limit is not None and limit < 1:
            raise ValueError("split() limit must be a positive integer")
        if isinstance(self._source, str):
            return text.split(self._source, -1 if limit is None else limit - 1)

        # re.split() would also return the pattern's groups; walk the matches instead.
        tokens = []
        start = 0
        for match in self._source.finditer(text):
            if limit is not None and len(tokens) == limit - 1:
                break
            if match.start() == match.end():
                continue
            tokens.append(text[start:match.start()])
            start = match.end()
        tokens.append(text[start:])
        return tokens

    def occurs_in(self, text, /):
        """
        Return True when the separator appears in text.
        """
        if isinstance(self._source, str):
            return self._source in text
        return self._source.search(text) is not None

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __eq__(self, other):
        if not isinstance(other, Delimiter):
            return NotImplemented
        return self._source == other._source

    def __hash__(self):
        return hash(self._source)

    def __repr__(self):
        source = self._source.pattern if isinstance(self._source, re.Pattern) else self._source
        return f"delimiter({source!r})"

    def __rich_repr__(self):
        yield "source", self._source


__all__ = (
    "Delimiter",
)
