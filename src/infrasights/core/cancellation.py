# -*- coding: utf-8 -*-
"""Per-request cooperative cancellation."""

from __future__ import annotations

import itertools
import threading

_ids = itertools.count(1)


class CancellationToken:
    """Liveness flag for one in-flight request.

    Cancelling does not interrupt the underlying call; whoever applies the
    result checks ``is_live`` first and drops the result when it is False.
    """

    def __init__(self, label: str = "") -> None:
        self.request_id = next(_ids)
        self.label = label
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def is_live(self) -> bool:
        return not self._cancelled.is_set()

    def __repr__(self) -> str:
        state = "live" if self.is_live else "cancelled"
        return f"CancellationToken(#{self.request_id} {self.label} {state})"
