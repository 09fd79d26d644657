"""Data models for the hunkfmt patch pipeline.

Contains:
- DiffOp: Operation tag of a single diff primitive
- Diff: One line-level equal/insert/delete primitive
- Patch: A parsed hunk with its origin/result spans
- Position: A (line, character) location in the original document
- EditAction: Delete / Insert / Replace
- Edit: A position-anchored edit against the original document
- EditorPosition, Range, TextEdit: Editor-native (LSP shaped) text edits
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DiffOp(Enum):
    """Operation tag of a diff primitive."""

    DELETE = -1
    EQUAL = 0
    INSERT = 1


@dataclass(frozen=True)
class Diff:
    """A single line of a hunk tagged with its operation."""

    op: DiffOp
    text: str


@dataclass
class Patch:
    """A parsed hunk.

    start1/length1 describe the span in the original document (0-based line
    index), start2/length2 the span in the formatted result.
    """

    diffs: list[Diff] = field(default_factory=list)
    start1: int = 0
    length1: int = 0
    start2: int = 0
    length2: int = 0


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line/character location, ordered in document order."""

    line: int
    character: int


class EditAction(Enum):
    """Kind of edit produced by the synthesizer."""

    DELETE = "delete"
    INSERT = "insert"
    REPLACE = "replace"


@dataclass(frozen=True)
class Edit:
    """An edit expressed in the coordinates of the original document."""

    action: EditAction
    start: Position
    end: Optional[Position] = None
    text: str = ""

    def __post_init__(self) -> None:
        if self.action is EditAction.INSERT:
            return
        if self.end is None:
            raise ValueError(f"{self.action.value} edit requires an end position")
        if self.end < self.start:
            raise ValueError(
                f"{self.action.value} edit ends before it starts: {self.start} > {self.end}"
            )
        if self.action is EditAction.DELETE and self.text:
            raise ValueError("delete edit cannot carry replacement text")


class EditorPosition(BaseModel):
    """Position as understood by the editor."""

    model_config = ConfigDict(frozen=True)

    line: int
    character: int


class Range(BaseModel):
    """Half-open [start, end) range in the editor's document."""

    model_config = ConfigDict(frozen=True)

    start: EditorPosition
    end: EditorPosition

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


class TextEdit(BaseModel):
    """Editor-native text edit: replace ``range`` with ``new_text``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    range: Range
    new_text: str = Field(default="", alias="newText")
