"""
Round-robin server selection.

The cursor is an ``itertools.count``: advancing it is a single C-level call,
so concurrent callers (tasks or threads) never block and never observe the
same position twice.
"""

import itertools
from typing import Iterable

from range_client.exceptions import EmptyPoolError


class RoundRobinSelector:
    """
    Cycles through a fixed list of server addresses.

    The first call returns the first configured address; after the last
    address the rotation starts again from the first.
    """

    def __init__(self, servers: Iterable[str]):
        pool = tuple(servers)
        if not pool:
            raise EmptyPoolError(
                "cannot create a round robin selector without at least one server"
            )
        if any(not server for server in pool):
            raise EmptyPoolError(
                "cannot create a round robin selector with an empty server address"
            )
        self._servers = pool
        self._cursor = itertools.count()

    @property
    def servers(self) -> tuple[str, ...]:
        return self._servers

    def next(self) -> str:
        """Return the next server address in rotation."""
        return self._servers[next(self._cursor) % len(self._servers)]

    def __len__(self) -> int:
        return len(self._servers)

    def __repr__(self) -> str:
        return f"RoundRobinSelector(servers={list(self._servers)})"
