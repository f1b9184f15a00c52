"""
Shared fixtures and independent reference computations for the test suite.
"""

import os
import sys
import heapq
from collections import deque
from functools import lru_cache

import numpy as np
import pytest

# Ensure project root is on path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from valve_search.network import Network, Valve
from valve_search.parsing import load_example_network


EXAMPLE_LINES = [
    "Valve AA has flow rate=0; tunnels lead to valves DD, II, BB",
    "Valve BB has flow rate=13; tunnels lead to valves CC, AA",
    "Valve CC has flow rate=2; tunnels lead to valves DD, BB",
    "Valve DD has flow rate=20; tunnels lead to valves CC, AA, EE",
    "Valve EE has flow rate=3; tunnels lead to valves FF, DD",
    "Valve FF has flow rate=0; tunnels lead to valves EE, GG",
    "Valve GG has flow rate=0; tunnels lead to valves FF, HH",
    "Valve HH has flow rate=22; tunnel leads to valve GG",
    "Valve II has flow rate=0; tunnels lead to valves AA, JJ",
    "Valve JJ has flow rate=21; tunnel leads to valve II",
]


@pytest.fixture
def example_network():
    return load_example_network()


@pytest.fixture
def example_lines():
    return list(EXAMPLE_LINES)


def build_network(flows, edges, start=0):
    """Network from flow rates and (a, b, distance) edges."""
    valves = [Valve(flow_rate=f, label=f"V{i}") for i, f in enumerate(flows)]
    for a, b, d in edges:
        valves[a].tunnels.append((b, d))
        valves[b].tunnels.append((a, d))
    return Network(valves=valves, start=start)


def random_network(seed, n_valves=12, n_flow=5, extra_edges=6, start=0):
    """Connected unit-distance network with `n_flow` flow valves."""
    rng = np.random.default_rng(seed)
    flows = [0] * n_valves
    flow_idx = rng.choice(np.arange(n_valves), size=n_flow, replace=False)
    for i in flow_idx:
        flows[int(i)] = int(rng.integers(1, 25))

    edges = set()
    order = rng.permutation(n_valves)
    for k in range(1, n_valves):
        a = int(order[k])
        b = int(order[rng.integers(0, k)])
        edges.add((min(a, b), max(a, b)))
    while extra_edges > 0:
        a, b = (int(x) for x in rng.choice(n_valves, size=2, replace=False))
        if (min(a, b), max(a, b)) not in edges:
            edges.add((min(a, b), max(a, b)))
            extra_edges -= 1
    return build_network(flows, [(a, b, 1) for a, b in sorted(edges)], start=start)


def bfs_distances(network, source):
    """Unit-weight shortest paths (ignores stored distances)."""
    dist = {source: 0}
    queue = deque([source])
    while queue:
        v = queue.popleft()
        for to, _ in network.valves[v].tunnels:
            if to not in dist:
                dist[to] = dist[v] + 1
                queue.append(to)
    return dist


def weighted_distances(network, source):
    """Dijkstra over stored tunnel distances."""
    dist = {source: 0}
    heap = [(0, source)]
    while heap:
        d, v = heapq.heappop(heap)
        if d > dist[v]:
            continue
        for to, w in network.valves[v].tunnels:
            if d + w < dist.get(to, float('inf')):
                dist[to] = d + w
                heapq.heappush(heap, (d + w, to))
    return dist


def reference_best(network, minutes, allowed=None):
    """
    Best single-actor pressure by memoised recursion over
    (valve, opened, time_left), optionally restricted to opening `allowed`.
    """
    allowed = frozenset(network.flow_valves()) if allowed is None else frozenset(allowed)

    @lru_cache(maxsize=None)
    def best_from(valve, opened, time_left):
        best = 0
        flow = network.valves[valve].flow_rate
        if time_left > 0 and flow > 0 and valve in allowed and valve not in opened:
            best = max(best, flow * (time_left - 1)
                       + best_from(valve, opened | {valve}, time_left - 1))
        for to, dist in network.valves[valve].tunnels:
            if time_left > dist:
                best = max(best, best_from(to, opened, time_left - dist))
        return best

    return best_from(network.start, frozenset(), minutes)


def reference_dual(network, minutes):
    """Best split of the flow valves between two independent actors."""
    flow = network.flow_valves()
    best = 0
    for bits in range(1 << len(flow)):
        mine = [v for k, v in enumerate(flow) if bits >> k & 1]
        theirs = [v for k, v in enumerate(flow) if not bits >> k & 1]
        best = max(best, reference_best(network, minutes, mine)
                   + reference_best(network, minutes, theirs))
    return best
