"""
transposition.py - Memo of search results by position

Different move orders reach the same position, and the lookahead's value for
a position depends only on the pieces and the plies left, so each result is
stored once per search and reused.
"""

from typing import Any, Dict, Hashable, Optional


class TranspositionTable:
    """Dictionary of search results with a hit counter."""

    def __init__(self):
        self.table: Dict[Hashable, Any] = {}
        self.hits = 0

    def get(self, key: Hashable) -> Optional[Any]:
        if key in self.table:
            self.hits += 1
            return self.table[key]
        return None

    def put(self, key: Hashable, value: Any):
        self.table[key] = value

    def reset(self):
        self.table.clear()
        self.hits = 0

    def __len__(self) -> int:
        return len(self.table)
