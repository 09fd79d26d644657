"""Patch-related exception classes.

Contains all exception classes for the patch-to-edit pipeline:
- PatchError: Base exception for patch-related errors
- MalformedPatchError: Raised when patch text violates the hunk grammar
- EditSynthesisError: Raised when a diff sequence cannot be turned into edits
"""


class PatchError(Exception):
    """Base exception for patch-related errors."""

    pass


class MalformedPatchError(PatchError):
    """Raised when the patch text cannot be parsed."""

    pass


class EditSynthesisError(PatchError):
    """Raised when a diff sequence breaks the delete-before-insert ordering."""

    pass
