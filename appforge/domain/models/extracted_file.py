"""Extracted file model."""

from pydantic import BaseModel, ConfigDict


class ExtractedFile(BaseModel):
    """One file recovered from a model reply.

    ``path`` is relative and slash-separated, and always carries a ``/`` or a
    ``.``. ``content`` is preserved verbatim apart from the single leading and
    trailing line break of its delimiters.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


# Ordered, first-appearance order; repeated paths are kept.
FileSet = list[ExtractedFile]
