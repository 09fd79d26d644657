"""Patch-to-edit pipeline for hunkfmt.

This package turns formatter diff output into editor edits:
- models: DiffOp, Diff, Patch, Position, EditAction, Edit, TextEdit
- parser: normalize_patch_text, parse_patches
- synthesizer: synthesize
- materializer: materialize, text_edits_from_patch, apply_text_edits
- exceptions: PatchError, MalformedPatchError, EditSynthesisError
"""

# Exceptions
from hunkfmt.patch.exceptions import (
    EditSynthesisError,
    MalformedPatchError,
    PatchError,
)

# Models
from hunkfmt.patch.models import (
    Diff,
    DiffOp,
    Edit,
    EditAction,
    EditorPosition,
    Patch,
    Position,
    Range,
    TextEdit,
)

# Parser
from hunkfmt.patch.parser import (
    normalize_patch_text,
    parse_patches,
)

# Synthesizer
from hunkfmt.patch.synthesizer import (
    synthesize,
)

# Materializer
from hunkfmt.patch.materializer import (
    apply_text_edits,
    materialize,
    text_edits_from_patch,
)


__all__ = [
    # Exceptions
    "PatchError",
    "MalformedPatchError",
    "EditSynthesisError",
    # Models
    "Diff",
    "DiffOp",
    "Patch",
    "Position",
    "EditAction",
    "Edit",
    "EditorPosition",
    "Range",
    "TextEdit",
    # Parser
    "normalize_patch_text",
    "parse_patches",
    # Synthesizer
    "synthesize",
    # Materializer
    "materialize",
    "text_edits_from_patch",
    "apply_text_edits",
]
