"""Mini README: Enumerate simple routes through the location graph.

``find_all_paths`` lists every cycle-free path between two locations,
shortest first and alphabetically within one length, for map displays and
route inspection. It does not consider energy or packages.
"""

from __future__ import annotations

from typing import List, Optional

from ..domain import Domain
from ..errors import MalformedQueryError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def find_all_paths(domain: Domain, start: str, end: str, max_length: Optional[int] = None) -> List[List[str]]:
    """All simple paths from ``start`` to ``end``; ``max_length`` counts edges."""

    for location in (start, end):
        if location not in domain.locations:
            raise MalformedQueryError("Unknown location", {"location": location})

    paths: List[List[str]] = []
    route = [start]
    visited = {start}

    def extend(current: str) -> None:
        if current == end:
            paths.append(list(route))
            return
        if max_length is not None and len(route) - 1 >= max_length:
            return
        for neighbour in domain.neighbors(current):
            if neighbour in visited:
                continue
            visited.add(neighbour)
            route.append(neighbour)
            extend(neighbour)
            route.pop()
            visited.discard(neighbour)

    extend(start)
    paths.sort(key=lambda path: (len(path), path))
    LOGGER.info("Found %s path(s) from %s to %s", len(paths), start, end)
    return paths
