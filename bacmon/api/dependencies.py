#!/usr/bin/env python3
"""
bacmon API Dependencies - store and clock injection
"""

import time
from typing import Callable, Optional

from .queries import SeriesStore


class QueryDependencies:
    """
    Container handed to every route factory.

    `now` is read once per request so all windows within one response agree.
    """

    def __init__(self, store: Optional[SeriesStore] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.store = store or SeriesStore()
        self.clock = clock or time.time

    def get_store(self) -> SeriesStore:
        return self.store

    def now(self) -> float:
        return self.clock()
