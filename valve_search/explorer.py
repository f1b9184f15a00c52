"""
Worklist exploration of (valve, opened-set, time-left) states.

From every state we may open the current valve (1 minute, it then releases
flow_rate * minutes_remaining), walk a tunnel (costs its distance), or stand
still until time runs out. Every popped state is a valid end point, so the
best pressure seen over all popped states is the answer.

Dominance pruning: for each (valve, opened-set) key we keep a numpy array
indexed by time-left holding the best pressure recorded with at least that
much time remaining. A revisited key whose pressure does not beat the stored
value at its own time-left is dropped before expansion.
"""

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from valve_search.network import OpenedSet


@dataclass
class ExplorationResult:
    """Output of explore()."""
    best_pressure: int
    best_by_opened: Dict[OpenedSet, int] = field(default_factory=dict)
    stats: dict = field(default_factory=dict)


def explore(network, minutes, track_opened_sets=False, verbose=False,
            report_every=100_000):
    """
    Explore every state reachable from the start valve with `minutes` left.

    Parameters:
        network: Network to search (compacted or not)
        minutes: time budget
        track_opened_sets: also record, per opened-set, the best pressure
            reached while holding exactly that set
        verbose: print progress every `report_every` popped states
        report_every: progress interval for verbose mode

    Returns:
        ExplorationResult with best_pressure, best_by_opened (empty unless
        track_opened_sets) and stats (states_popped, states_expanded,
        states_pruned, memo_keys, elapsed).

    Raises:
        ValueError: negative budget
        CapacityError: more flow valves than an OpenedSet can hold
    """
    if minutes < 0:
        raise ValueError(f"time budget must be non-negative, got {minutes}")

    empty = OpenedSet.for_network(network)
    capacity = empty.capacity
    flow_rates = [valve.flow_rate for valve in network.valves]
    tunnels = [valve.tunnels for valve in network.valves]
    bits = network.bit_positions()

    t0 = time.time()

    # (valve, mask) -> best pressure by time-left, backfilled downwards
    best_at_minute = {}
    best_by_mask = {}
    max_pressure = 0
    popped = 0
    pruned = 0

    # Entries: (valve, mask, time_left, pressure)
    queue = deque([(network.start, empty.mask, minutes, 0)])

    while queue:
        valve, mask, time_left, pressure = queue.popleft()
        popped += 1

        if verbose and popped % report_every == 0:
            print(f"  popped={popped} queue={len(queue)} keys={len(best_at_minute)} "
                  f"best={max_pressure}")

        key = (valve, mask)
        best = best_at_minute.get(key)
        if best is None:
            # -1 marks time-left slots no visit has reached yet
            best = best_at_minute[key] = np.full(minutes + 1, -1, dtype=np.int64)
        elif best[time_left] >= pressure:
            pruned += 1
            continue
        window = best[:time_left + 1]
        np.maximum(window, pressure, out=window)

        # Stay put until the end
        if pressure > max_pressure:
            max_pressure = pressure
        if track_opened_sets and pressure > best_by_mask.get(mask, -1):
            best_by_mask[mask] = pressure

        # Open this valve
        bit = bits[valve]
        if time_left > 0 and bit is not None and not mask >> bit & 1:
            queue.append((
                valve,
                mask | 1 << bit,
                time_left - 1,
                pressure + flow_rates[valve] * (time_left - 1),
            ))

        # Walk a tunnel
        for to, dist in tunnels[valve]:
            if time_left > dist:
                queue.append((to, mask, time_left - dist, pressure))

    elapsed = time.time() - t0
    stats = {
        'states_popped': popped,
        'states_expanded': popped - pruned,
        'states_pruned': pruned,
        'memo_keys': len(best_at_minute),
        'elapsed': elapsed,
    }
    if verbose:
        print(f"  Explored {minutes} min: popped={popped}, pruned={pruned}, "
              f"keys={len(best_at_minute)}, best={max_pressure} ({elapsed:.2f}s)")

    best_by_opened = {
        OpenedSet(capacity, mask): value for mask, value in best_by_mask.items()
    }
    return ExplorationResult(
        best_pressure=max_pressure,
        best_by_opened=best_by_opened,
        stats=stats,
    )
