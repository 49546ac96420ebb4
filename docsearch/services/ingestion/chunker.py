"""Recursive, separator-aware text chunking with bounded overlap.

Splits document text into chunks of at most ``chunk_size`` characters for
the embedding model.  The strategy has three design goals:

1. **Natural boundaries**: text is split on the coarsest separator that
   works (paragraph breaks, then line breaks, then spaces) and only falls
   back to fixed character windows when a run of text has no separator at
   all.  Chunks therefore rarely start or end mid-word.

2. **Bounded overlap**: each chunk after the first starts up to
   ``chunk_overlap`` characters before the previous chunk ended, snapped to
   a separator inside that window, so a sentence spanning a boundary is
   whole in at least one chunk.

3. **Exact slices**: every chunk is ``text[start:end]`` of the input.
   Nothing is stripped or rewritten, so concatenating the non-overlapping
   parts of consecutive chunks reproduces the input exactly and each
   chunk's character offset can be recorded.

Separators stay attached to the end of the piece they terminate.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from docsearch.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from docsearch.models.documents import RawDocument

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")

Span = tuple[int, int]


class TextChunker:
    """Splits text into overlapping chunks along separator boundaries.

    The algorithm works in two phases:
    1. Recursively cut the text into *units* no longer than ``chunk_size``,
       using each separator in priority order and a character window as
       the last resort
    2. Greedily merge consecutive units into chunks; when the next unit
       would overflow, emit the chunk and open a new one inside the
       overlap window of the previous chunk

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Maximum number of characters shared by consecutive chunks.  Must
        be smaller than *chunk_size*.
    separators:
        Split boundaries in priority order.  An empty string means
        "character windows" and, if present, should come last.

    Raises
    ------
    ConfigurationError
        If ``chunk_size <= 0``, ``chunk_overlap < 0`` or
        ``chunk_overlap >= chunk_size``.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
    ) -> None:
        if chunk_size <= 0:
            raise ConfigurationError(message=f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ConfigurationError(
                message=(
                    f"chunk_overlap must be in [0, chunk_size); got "
                    f"chunk_overlap={chunk_overlap}, chunk_size={chunk_size}"
                )
            )
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._separators = tuple(separators)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def split(self, document: RawDocument) -> list[str]:
        """Split a loaded document's full text."""
        return self.split_text(document.page_content)

    def split_text(self, text: str) -> list[str]:
        """Split *text* into chunk strings.

        Empty input returns an empty list; any non-empty input yields at
        least one chunk.
        """
        return [text[start:end] for start, end in self.split_spans(text)]

    def split_spans(self, text: str) -> list[Span]:
        """Return ``(start, end)`` offsets of each chunk of *text*.

        Spans are ordered, each covers at most ``chunk_size`` characters,
        and consecutive spans either touch or overlap by at most
        ``chunk_overlap`` characters.
        """
        if not text:
            return []

        units = self._split_span(text, 0, len(text), self._separators)
        spans = self._merge_units(text, units)

        logger.debug(
            "chunking_complete",
            num_chunks=len(spans),
            text_length=len(text),
            chunk_size=self._chunk_size,
        )
        return spans

    # ------------------------------------------------------------------
    # Phase 1: recursive splitting into units
    # ------------------------------------------------------------------

    def _split_span(
        self, text: str, start: int, end: int, separators: tuple[str, ...]
    ) -> list[Span]:
        """Cut ``text[start:end]`` into contiguous units of at most ``chunk_size``."""
        if end - start <= self._chunk_size:
            return [(start, end)]

        for position, separator in enumerate(separators):
            if separator == "":
                return self._window_span(start, end)
            if text.find(separator, start, end) == -1:
                continue

            finer = separators[position + 1 :]
            units: list[Span] = []
            for piece_start, piece_end in self._pieces(text, start, end, separator):
                units.extend(self._split_span(text, piece_start, piece_end, finer))
            return units

        return self._window_span(start, end)

    @staticmethod
    def _pieces(text: str, start: int, end: int, separator: str) -> list[Span]:
        """Split a span after each occurrence of *separator*."""
        pieces: list[Span] = []
        cursor = start
        while cursor < end:
            found = text.find(separator, cursor, end)
            piece_end = end if found == -1 else found + len(separator)
            pieces.append((cursor, piece_end))
            cursor = piece_end
        return pieces

    def _window_span(self, start: int, end: int) -> list[Span]:
        """Fixed character windows for text with no usable separator.

        Windows are ``chunk_size - chunk_overlap`` wide so the merge phase
        can still give consecutive chunks a full overlap.
        """
        width = self._chunk_size - self._chunk_overlap
        return [(pos, min(pos + width, end)) for pos in range(start, end, width)]

    # ------------------------------------------------------------------
    # Phase 2: greedy merge with overlap
    # ------------------------------------------------------------------

    def _merge_units(self, text: str, units: list[Span]) -> list[Span]:
        spans: list[Span] = []
        chunk_start = units[0][0]
        chunk_end = chunk_start

        for _, unit_end in units:
            if unit_end - chunk_start <= self._chunk_size:
                chunk_end = unit_end
                continue
            spans.append((chunk_start, chunk_end))
            chunk_start = self._overlap_start(text, chunk_end, unit_end)
            chunk_end = unit_end

        spans.append((chunk_start, chunk_end))
        return spans

    def _overlap_start(self, text: str, prev_end: int, unit_end: int) -> int:
        """Pick where the next chunk begins.

        The start lies in ``[prev_end - chunk_overlap, prev_end]`` and is
        late enough that the chunk can still hold the unit ending at
        *unit_end*.  Within that window the start snaps to just after the
        first occurrence of the highest-priority separator; trailing
        whitespace of the previous chunk is ignored so a paragraph break
        at its very end does not cancel the overlap.
        """
        earliest = max(prev_end - self._chunk_overlap, unit_end - self._chunk_size)
        if earliest >= prev_end:
            return prev_end

        window = text[earliest:prev_end].rstrip()
        for separator in self._separators:
            if not separator:
                break
            found = window.find(separator)
            if found != -1:
                return earliest + found + len(separator)
        return earliest
