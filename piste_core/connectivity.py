from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Set

from .board import UNCONTROLLED, Board, Coord, neighbors

logger = logging.getLogger(__name__)


def connected_spaces(board: Board) -> Set[Coord]:
    """
    Finds every space linked to its owner's core through that owner's territory.
    This is a Breadth First Search seeded with all core spaces of both players.
    """
    reached: Set[Coord] = set()
    queue: Deque[Coord] = deque()
    for coord, space in board.spaces():
        if space.is_core:
            reached.add(coord)
            queue.append(coord)

    while queue:
        current = queue.popleft()
        owner = board.at(*current).owner
        for nxt in neighbors(board, current):
            if nxt in reached:
                continue
            space = board.at(*nxt)
            # Cores are already seeded; only controlled spaces extend the fill.
            if space.is_controlled and space.owner == owner:
                reached.add(nxt)
                queue.append(nxt)
    return reached


def disconnected_spaces(board: Board) -> List[Coord]:
    """Lists controlled spaces with no same-owner path back to a core space."""
    reached = connected_spaces(board)
    return [coord for coord, space in board.spaces() if space.is_controlled and coord not in reached]


def prune_disconnected(board: Board) -> Board:
    """Returns the board with every disconnected controlled space reset to uncontrolled."""
    cut = disconnected_spaces(board)
    if cut:
        logger.debug('Pruned %d disconnected spaces', len(cut))
    return board.with_spaces({coord: UNCONTROLLED for coord in cut})
