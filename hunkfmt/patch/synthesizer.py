"""Edit synthesizer for hunkfmt.

Walks the diffs of a Patch against the original document and produces
Delete / Insert / Replace edits anchored in original-document coordinates.

Contains:
- synthesize: Build the edits for one Patch
- Idle / Accumulating: States of the edit-in-progress slot
"""

import os
import re
from dataclasses import dataclass, replace
from typing import Optional, Union

from hunkfmt.logger import logger
from hunkfmt.patch.exceptions import EditSynthesisError
from hunkfmt.patch.models import Diff, DiffOp, Edit, EditAction, Patch, Position


NEW_LINE_LENGTH = len(os.linesep)

_ORIGINAL_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class Idle:
    """No edit is being accumulated."""


@dataclass(frozen=True)
class Accumulating:
    """An edit is being built from consecutive delete/insert diffs."""

    action: EditAction
    start: Position
    end: Optional[Position] = None
    text: str = ""

    def to_edit(self) -> Edit:
        return Edit(action=self.action, start=self.start, end=self.end, text=self.text)


EditState = Union[Idle, Accumulating]

IDLE = Idle()


def _advance(position: Position, text: str) -> Position:
    """Return the position reached after consuming ``text`` from ``position``."""
    line = position.line
    character = position.character
    for char in text:
        if char == "\n":
            line += 1
            character = 0
        else:
            character += 1
    return Position(line, character)


def _initial_position(original_text: str, start_line: int) -> Position:
    """Cursor at the start of a patch.

    For ``start_line > 0`` the character counter is pre-advanced by the
    length (plus terminator) of every preceding original line.
    The first newline walked resets it, so hunks that open with context
    lines are unaffected. A zero-context hunk starting with a change keeps
    the large offset and the editor clamps it to the end of the line.
    """
    character = 0
    if start_line > 0:
        before_lines = _ORIGINAL_LINE_SPLIT_RE.split(original_text)
        for line in before_lines[:start_line]:
            character += len(line) + NEW_LINE_LENGTH
    return Position(start_line, character)


def _on_delete(state: EditState, start: Position, end: Position) -> EditState:
    if isinstance(state, Idle):
        return Accumulating(EditAction.DELETE, start, end)
    if state.action is not EditAction.DELETE:
        raise EditSynthesisError(
            f"cannot format due to an internal error: delete after {state.action.value} at {start}"
        )
    return replace(state, end=end)


def _on_insert(state: EditState, start: Position, text: str) -> EditState:
    if isinstance(state, Idle):
        return Accumulating(EditAction.INSERT, start, text=text)
    if state.action is EditAction.DELETE:
        return replace(state, action=EditAction.REPLACE, text=state.text + text)
    return replace(state, text=state.text + text)


def synthesize(original_text: str, patch: Patch) -> list[Edit]:
    """Synthesize the edits described by one patch.

    Args:
        original_text: Full text of the document before formatting.
        patch: A parsed patch whose diffs carry their line terminators.

    Returns:
        Edits in document order, expressed against ``original_text``.

    Raises:
        EditSynthesisError: If a delete follows an insert within one change block.
    """
    return _synthesize_diffs(original_text, patch.diffs, patch.start1)


def _synthesize_diffs(original_text: str, diffs: list[Diff], start_line: int = 0) -> list[Edit]:
    cursor = _initial_position(original_text, start_line)
    edits: list[Edit] = []
    state: EditState = IDLE

    for diff in diffs:
        start = cursor
        end = _advance(start, diff.text)

        if diff.op is DiffOp.DELETE:
            state = _on_delete(state, start, end)
            cursor = end
        elif diff.op is DiffOp.INSERT:
            state = _on_insert(state, start, diff.text)
            # Inserted text only exists in the result; the walk over the
            # original stays where it was.
            cursor = start
        else:
            if isinstance(state, Accumulating):
                edits.append(state.to_edit())
                state = IDLE
            cursor = end

    if isinstance(state, Accumulating):
        edits.append(state.to_edit())

    logger.debug("synthesized_edits", start_line=start_line, diffs=len(diffs), edits=len(edits))
    return edits
