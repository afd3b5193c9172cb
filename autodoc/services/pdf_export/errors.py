"""
Export Errors

Fatal conditions that abort a whole export. Per-annotation problems
(out-of-range pages, unknown colors) are not errors and never raise.
"""


class ExportError(Exception):
    """Base class for failures that abort an export."""


class DocumentNotFoundError(ExportError):
    """The source document bytes could not be located."""

    def __init__(self, message: str = "document not found"):
        super().__init__(message)


class MalformedDocumentError(ExportError):
    """The source bytes do not parse as a usable PDF document."""


class SerializationError(ExportError):
    """The annotated working document could not be written out."""
