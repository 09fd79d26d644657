"""Patch parser for hunkfmt.

Contains functions for parsing the unified-diff subset emitted by formatters:
- normalize_patch_text: Strip file headers and "no newline" markers
- parse_patches: Parse hunk text into Patch objects
- _parse_header: Parse a single @@ header line
- _normalize_span: Apply the omitted-length rules to one header half
"""

import os
import re

from hunkfmt.logger import logger
from hunkfmt.patch.exceptions import MalformedPatchError
from hunkfmt.patch.models import Diff, DiffOp, Patch


_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+),?(\d*) \+(\d+),?(\d*) @@$")
_LINE_SPLIT_RE = re.compile(r"\r?\n")
_NO_NEWLINE_MARKER_RE = re.compile(r"\\ No newline at end of file(?:\r?\n|$)")

_SIGN_TO_OP = {
    "-": DiffOp.DELETE,
    "+": DiffOp.INSERT,
    " ": DiffOp.EQUAL,
}


def normalize_patch_text(patch_text: str) -> str:
    """Prepare raw formatter output for parse_patches.

    Drops a leading ``---``/``+++`` file header block and every
    ``\\ No newline at end of file`` marker line.

    Args:
        patch_text: Raw diff text as printed by the formatter.

    Returns:
        Text starting at the first hunk header.
    """
    if patch_text.startswith("---"):
        hunk_start = patch_text.find("@@")
        if hunk_start >= 0:
            patch_text = patch_text[hunk_start:]

    return _NO_NEWLINE_MARKER_RE.sub("", patch_text)


def _normalize_span(start: str, length: str) -> tuple[int, int]:
    """Convert a 1-based header half into a 0-based (start, length) pair.

    Args:
        start: Start digits from the header.
        length: Length digits from the header (may be empty).

    Returns:
        Tuple of (start, length).
    """
    start_value = int(start)
    if length == "":
        return start_value - 1, 1
    if length == "0":
        return start_value, 0
    return start_value - 1, int(length)


def _parse_header(line: str) -> tuple[int, int, int, int]:
    """Parse an ``@@ -a,b +c,d @@`` line.

    Returns:
        Tuple of (start1, length1, start2, length2).

    Raises:
        MalformedPatchError: If the line is not a hunk header.
    """
    match = _HUNK_HEADER_RE.match(line)
    if not match:
        raise MalformedPatchError(f"Invalid patch string: {line}")

    start1, length1 = _normalize_span(match.group(1), match.group(2))
    start2, length2 = _normalize_span(match.group(3), match.group(4))
    return start1, length1, start2, length2


def parse_patches(patch_text: str) -> list[Patch]:
    """Parse a textual patch into a list of Patch objects.

    Splitting strips the line terminators; every diff payload gets
    ``os.linesep`` re-appended so the synthesizer can count lines while
    walking the original document.

    Args:
        patch_text: Patch text starting at a hunk header.

    Returns:
        Ordered list of Patch objects.

    Raises:
        MalformedPatchError: On a bad header or an unknown line sign.
    """
    patches: list[Patch] = []
    if not patch_text or not patch_text.strip():
        return patches

    lines = _LINE_SPLIT_RE.split(patch_text)
    pointer = 0

    while pointer < len(lines):
        # Blank separators between hunks carry no content
        if lines[pointer] == "":
            pointer += 1
            continue

        start1, length1, start2, length2 = _parse_header(lines[pointer])
        pointer += 1

        diffs: list[Diff] = []
        while pointer < len(lines):
            line = lines[pointer]
            sign = line[:1]
            if sign == "@":
                # Start of the next hunk
                break
            if sign == "":
                pointer += 1
                continue
            op = _SIGN_TO_OP.get(sign)
            if op is None:
                raise MalformedPatchError(f"Invalid patch mode '{sign}' in: {line[1:]}")
            diffs.append(Diff(op, line[1:] + os.linesep))
            pointer += 1

        patches.append(
            Patch(
                diffs=diffs,
                start1=start1,
                length1=length1,
                start2=start2,
                length2=length2,
            )
        )

    logger.debug("parsed_patches", count=len(patches))
    return patches
