"""
Outcome of looking up source information for a class.
"""

from dataclasses import dataclass


class Result:
    """Base of the four possible outcomes."""


@dataclass(frozen=True)
class _NoSourceInfo(Result):
    """The class was not found, or carries no SourceFile attribute."""

    def __str__(self) -> str:
        return "<no source info>"


NoSourceInfo = _NoSourceInfo()


@dataclass(frozen=True)
class UnknownSourceFormat(Result):
    """The class bytes could not be decoded."""
    explanation: str

    def __str__(self) -> str:
        return self.explanation


@dataclass(frozen=True)
class SourceFile(Result):
    """Source file name without line information."""
    filename: str

    def __str__(self) -> str:
        return self.filename


@dataclass(frozen=True)
class SourceFileLines(Result):
    """Source file name and the span of lines covered by the code."""
    filename: str
    from_line: int
    to_line: int

    def __post_init__(self):
        if self.from_line > self.to_line:
            raise ValueError(f"from_line {self.from_line} > to_line {self.to_line}")

    def __str__(self) -> str:
        if self.from_line != self.to_line:
            return f"{self.filename}:{self.from_line}-{self.to_line}"
        return f"{self.filename}:{self.from_line}"
