from __future__ import annotations

import logging
from typing import List, Optional

from PIL import Image

logger = logging.getLogger(__name__)


class MaskHistory:
    """Linear undo/redo over full snapshots of the mask layer.

    Entries are private copies; callers get copies back, so painting into a
    restored mask never alters the stored snapshot. ``index`` points at the
    entry currently materialized in the mask layer, or is -1 when empty.
    """

    def __init__(self, limit: int = 50) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1.")
        self.limit = limit
        self._entries: List[Image.Image] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._index < len(self._entries) - 1

    def current(self) -> Optional[Image.Image]:
        if self._index < 0:
            return None
        return self._entries[self._index].copy()

    def reset(self, empty: Image.Image) -> None:
        self._entries = [empty.copy()]
        self._index = 0

    def save_state(self, snapshot: Image.Image) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(snapshot.copy())
        self._index = len(self._entries) - 1
        while len(self._entries) > self.limit:
            self._entries.pop(0)
            self._index -= 1
        logger.debug("Mask history: %d entries, index %d", len(self._entries), self._index)

    def undo(self) -> Optional[Image.Image]:
        if self._index <= 0:
            return None
        self._index -= 1
        return self._entries[self._index].copy()

    def redo(self) -> Optional[Image.Image]:
        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index].copy()

    def rescale(self, size: tuple[int, int]) -> None:
        # Mask pixels stay either solid red or fully transparent.
        self._entries = [
            entry if entry.size == size else entry.resize(size, resample=Image.NEAREST)
            for entry in self._entries
        ]
