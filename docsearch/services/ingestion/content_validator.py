"""Whole-document content validation.

A document is worth indexing only when it has real text and that text is
below the size ceiling of the embedding provider.  Validation runs on the
full document before chunking; documents that fail are excluded from the
run (and counted by the orchestrator), never truncated.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_CONTENT_CHARS = 8192


class ContentValidator:
    """Decides whether a document's text may enter the pipeline.

    Parameters
    ----------
    max_chars:
        Exclusive upper bound on the stripped text length.  Text whose
        stripped length is ``max_chars`` or more is rejected.
    """

    def __init__(self, max_chars: int = DEFAULT_MAX_CONTENT_CHARS) -> None:
        self._max_chars = max_chars

    @property
    def max_chars(self) -> int:
        return self._max_chars

    def is_valid(self, content: object) -> bool:
        """Return ``True`` if *content* is a non-blank string under the size bound."""
        return self.rejection_reason(content) is None

    def rejection_reason(self, content: object) -> str | None:
        """Return why *content* would be rejected, or ``None`` if it is valid.

        The reason is a short machine-friendly token used as a log field.
        """
        if not isinstance(content, str):
            return "not_text"
        length = len(content.strip())
        if length == 0:
            return "empty"
        if length >= self._max_chars:
            return "too_long"
        return None
