# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Streaming detection of tool call fences.
"""

import re
import logging

from ..models import FenceDetection, StreamingFenceUpdate
from .parser import CALL_FENCE_MARKER, FENCE_DELIMITER, fence_pattern, opener_pattern

logger = logging.getLogger(__name__)


class ToolCallFenceDetector:
    """Incremental detector for fenced tool call blocks in streamed model output.

    One instance belongs to one in-flight response. Chunks are concatenated in
    arrival order, so results depend only on the accumulated text and never on
    where the chunk boundaries fall.

    States:
    1. searching - no opening marker in the unresolved buffer
    2. in_fence - an opening marker was seen, waiting for the closing marker
    Extracting a fence drops the consumed text and returns to searching.
    """

    def __init__(self, marker: str = CALL_FENCE_MARKER):
        self.marker = marker
        self.fence_start = FENCE_DELIMITER + marker
        self._fence_re = fence_pattern(marker)
        self._opener_re = opener_pattern(marker)
        # Opening marker that is only waiting for its line break
        self._pending_opener_re = re.compile(rf"{re.escape(self.fence_start)}[ \t]*\r?\Z")
        self.reset()

    def reset(self):
        self.buffer = ""

    def add_chunk(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"chunk must be str, got {type(text).__name__}")
        if not text:
            return
        self.buffer += text
        logger.debug(
            f"🔧 Processing chunk: {repr(text[:50])}{'...' if len(text) > 50 else ''}, buffer length: {len(self.buffer)}")

    def has_content(self) -> bool:
        return bool(self.buffer)

    @property
    def in_fence(self) -> bool:
        """True while an opening marker is buffered without its closing marker.

        Complete fences still waiting for detect_fence() are skipped, so only
        the text after the last of them decides.
        """
        resolved_end = 0
        for match in self._fence_re.finditer(self.buffer):
            resolved_end = match.end()
        return self._opener_re.search(self.buffer, resolved_end) is not None

    @property
    def state(self) -> str:
        return "in_fence" if self.in_fence else "searching"

    def detect_fence(self) -> FenceDetection:
        """
        Return the next complete fence, or fence=None if none is available yet.

        On success the fence and the prose before it are removed from the
        buffer, so the same fence is never returned twice. Without a complete
        fence nothing changes, and polling again gives the same answer.
        """
        match = self._fence_re.search(self.buffer)
        if match is None:
            return FenceDetection(fence=None, prefix_text="")

        prefix_text = self.buffer[:match.start()]
        fence = match.group(1).strip()
        self.buffer = self.buffer[match.end():]
        logger.debug(f"🔧 Detected complete fence: {repr(fence[:100])}, remaining buffer: {len(self.buffer)}")
        return FenceDetection(fence=fence, prefix_text=prefix_text)

    def detect_streaming_fence(self) -> StreamingFenceUpdate:
        """
        Release prose that can safely be shown while the stream is running.

        Text that could still turn into an opening marker is held back until
        the next chunk decides it.
        """
        detection = self.detect_fence()
        if detection.fence is not None:
            return StreamingFenceUpdate(
                in_fence=False,
                safe_content=detection.prefix_text,
                complete_fence=detection.fence,
            )

        opener = self._opener_re.search(self.buffer)
        if opener is not None:
            safe_content = self.buffer[:opener.start()]
            self.buffer = self.buffer[opener.start():]
            return StreamingFenceUpdate(in_fence=True, safe_content=safe_content)

        hold_from = self._partial_opener_start()
        safe_content = self.buffer[:hold_from]
        self.buffer = self.buffer[hold_from:]
        return StreamingFenceUpdate(in_fence=False, safe_content=safe_content)

    def _partial_opener_start(self) -> int:
        """Index where a possibly incomplete opening marker begins at the buffer tail."""
        pending = self._pending_opener_re.search(self.buffer)
        if pending is not None:
            return pending.start()

        max_overlap = min(len(self.fence_start) - 1, len(self.buffer))
        for size in range(max_overlap, 0, -1):
            if self.fence_start.startswith(self.buffer[-size:]):
                return len(self.buffer) - size
        return len(self.buffer)
