"""
Single- and dual-actor pressure solvers built on explore().

Dual actor: both actors explore independently with the shorter budget; the
answer is the best sum over two opened-sets with no valve in common.
"""

import numpy as np

from valve_search.compaction import compact_network
from valve_search.explorer import explore

PART_ONE_MINUTES = 30
PART_TWO_MINUTES = 26


def solve_single_actor(network, minutes=PART_ONE_MINUTES, compact=True, verbose=False):
    """Most pressure one actor can release in `minutes`."""
    if compact:
        network = compact_network(network)
    return explore(network, minutes, verbose=verbose).best_pressure


def combine_disjoint_sets(best_by_opened):
    """
    Best pressureA + pressureB over opened-sets A, B with A & B empty.

    A set is only paired with itself when it is empty (one actor idles).
    Returns 0 for an empty mapping.
    """
    if not best_by_opened:
        return 0
    masks = np.fromiter((s.mask for s in best_by_opened), dtype=np.uint64,
                        count=len(best_by_opened))
    pressures = np.fromiter(best_by_opened.values(), dtype=np.int64,
                            count=len(best_by_opened))

    best_total = 0
    for mask, pressure in zip(masks, pressures):
        disjoint = (masks & mask) == 0
        if disjoint.any():
            best_total = max(best_total, int(pressure + pressures[disjoint].max()))
    return best_total


def solve_dual_actor(network, minutes=PART_TWO_MINUTES, compact=True, verbose=False):
    """Most pressure two independent actors can release in `minutes`."""
    if compact:
        network = compact_network(network)
    result = explore(network, minutes, track_opened_sets=True, verbose=verbose)
    return combine_disjoint_sets(result.best_by_opened)


def solve(network, verbose=False):
    """(part one, part two) with the standard budgets."""
    return (
        solve_single_actor(network, verbose=verbose),
        solve_dual_actor(network, verbose=verbose),
    )
