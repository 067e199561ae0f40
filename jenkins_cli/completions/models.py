"""Data models for shell completion."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["CompletionCandidate", "CompletionRequest"]


@dataclass(frozen=True)
class CompletionCandidate:
    """One suggested word, with an optional description for shells that show one."""

    value: str
    description: str = ""


@dataclass(frozen=True)
class CompletionRequest:
    """A partial command line and the cursor position inside it.

    Only the text before the cursor is considered. `tokens` are the completed
    whitespace separated words (the program name included) and `current` is
    the word being typed, empty right after a space.
    """

    line: str
    cursor: int

    @classmethod
    def from_line(cls, line: str, cursor: int | None = None) -> CompletionRequest:
        """Build a request, the cursor defaulting to the end of the line.

        Args:
            line: The command line typed so far
            cursor: Cursor offset in characters

        Returns:
            The request

        Raises:
            ValueError: If the cursor lies outside the line
        """
        if cursor is None:
            cursor = len(line)
        if not 0 <= cursor <= len(line):
            msg = f"Cursor {cursor} outside of a {len(line)} characters line"
            raise ValueError(msg)
        return cls(line=line, cursor=cursor)

    @property
    def text(self) -> str:
        """The part of the line before the cursor."""
        return self.line[: self.cursor]

    @property
    def tokens(self) -> tuple[str, ...]:
        """Completed words before the cursor, program name first."""
        words = self.text.split()
        if words and not self.text[-1].isspace():
            words.pop()
        return tuple(words)

    @property
    def current(self) -> str:
        """The word under completion."""
        text = self.text
        if not text or text[-1].isspace():
            return ""
        return text.split()[-1]
