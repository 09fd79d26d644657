"""Edit materializer for hunkfmt.

Contains:
- materialize: Convert a synthesized Edit into an editor TextEdit
- text_edits_from_patch: Full pipeline from formatter output to TextEdits
- apply_text_edits: Apply a batch of TextEdits to a text snapshot
"""

from hunkfmt.logger import logger
from hunkfmt.patch.models import (
    Edit,
    EditAction,
    EditorPosition,
    Position,
    Range,
    TextEdit,
)
from hunkfmt.patch.parser import normalize_patch_text, parse_patches
from hunkfmt.patch.synthesizer import synthesize


def _to_editor_position(position: Position) -> EditorPosition:
    return EditorPosition(line=position.line, character=position.character)


def materialize(edit: Edit) -> TextEdit:
    """Convert an Edit into the editor's native text edit.

    Insert becomes a zero-width range at ``start``; Delete and Replace cover
    ``[start, end)``.
    """
    start = _to_editor_position(edit.start)
    if edit.action is EditAction.INSERT:
        return TextEdit(range=Range(start=start, end=start), new_text=edit.text)
    end = _to_editor_position(edit.end)
    if edit.action is EditAction.DELETE:
        return TextEdit(range=Range(start=start, end=end), new_text="")
    return TextEdit(range=Range(start=start, end=end), new_text=edit.text)


def text_edits_from_patch(original_text: str, patch_text: str) -> list[TextEdit]:
    """Translate formatter patch output into edits against ``original_text``.

    Args:
        original_text: The document text the formatter was run on.
        patch_text: Raw diff printed by the formatter.

    Returns:
        TextEdits in document order. Empty when the patch is empty.

    Raises:
        MalformedPatchError: If the patch cannot be parsed.
        EditSynthesisError: If a hunk breaks the diff ordering contract.
    """
    patch_text = normalize_patch_text(patch_text)
    if not patch_text.strip():
        return []

    patches = parse_patches(patch_text)

    text_edits: list[TextEdit] = []
    for patch in patches:
        for edit in synthesize(original_text, patch):
            text_edits.append(materialize(edit))

    logger.debug("text_edits_from_patch", patches=len(patches), edits=len(text_edits))
    return text_edits


def _line_starts(text: str) -> list[int]:
    starts = [0]
    for index, char in enumerate(text):
        if char == "\n":
            starts.append(index + 1)
    return starts


def _offset_at(text: str, line_starts: list[int], position: EditorPosition) -> int:
    """Offset of ``position`` in ``text``, clamped the way editors clamp."""
    if position.line >= len(line_starts):
        return len(text)

    line_start = line_starts[position.line]
    if position.line + 1 < len(line_starts):
        content_end = line_starts[position.line + 1] - 1
        if content_end > line_start and text[content_end - 1] == "\r":
            content_end -= 1
    else:
        content_end = len(text)

    return line_start + min(position.character, content_end - line_start)


def apply_text_edits(text: str, edits: list[TextEdit]) -> str:
    """Apply edits computed against one snapshot of ``text``.

    All edits are validated before any is applied.

    Raises:
        ValueError: If two edits overlap.
    """
    line_starts = _line_starts(text)
    spans = []
    for order, edit in enumerate(edits):
        start = _offset_at(text, line_starts, edit.range.start)
        end = _offset_at(text, line_starts, edit.range.end)
        spans.append((start, end, order, edit.new_text))
    spans.sort()

    pieces: list[str] = []
    last = 0
    for start, end, _order, new_text in spans:
        if start < last:
            raise ValueError(f"Overlapping edits at offset {start}")
        pieces.append(text[last:start])
        pieces.append(new_text)
        last = end
    pieces.append(text[last:])
    return "".join(pieces)
