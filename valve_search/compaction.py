"""
Graph compaction: remove zero-flow valves and rewire their neighbours.

Eliminating a valve connects every pair of its neighbours with the sum of
their distances through it, keeping the shorter edge if one already exists.
After all zero-flow valves (other than the start) are gone, shortest paths
between the retained valves are the same as in the original network. Since
elimination only ever shortens edges, the order of elimination does not
matter; we use ascending index order.
"""

from valve_search.network import OPENED_SET_CAPACITY, CapacityError, Network, Valve


def _eliminate(adjacency, victim):
    """Remove `victim` from `adjacency` (list of {neighbor: distance})."""
    neighbours = adjacency[victim]
    adjacency[victim] = {}
    for a in neighbours:
        adjacency[a].pop(victim, None)
    for a, da in neighbours.items():
        for b, db in neighbours.items():
            if a >= b:
                continue
            candidate = da + db
            current = adjacency[a].get(b)
            if current is None or candidate < current:
                adjacency[a][b] = candidate
                adjacency[b][a] = candidate


def compact_network(network):
    """
    Return a new Network holding only the start and flow-producing valves.

    The start valve becomes index 0, followed by the other flow valves in
    ascending original order. `origin` on the result maps each index back to
    `network`; the input is left untouched.

    Raises:
        CapacityError: more flow valves than an OpenedSet can hold.
    """
    flow = network.flow_valves()
    if len(flow) > OPENED_SET_CAPACITY:
        raise CapacityError(
            f"network has {len(flow)} flow valves; at most "
            f"{OPENED_SET_CAPACITY} are supported"
        )

    # Work on a dict-of-dicts copy so nothing is mutated while it is iterated.
    adjacency = [dict(valve.tunnels) for valve in network.valves]
    for i, valve in enumerate(network.valves):
        if i != network.start and valve.flow_rate == 0:
            _eliminate(adjacency, i)

    kept = [network.start] + [i for i in flow if i != network.start]
    new_index = {old: new for new, old in enumerate(kept)}

    valves = []
    for old in kept:
        source = network.valves[old]
        tunnels = sorted((new_index[to], dist) for to, dist in adjacency[old].items())
        valves.append(Valve(flow_rate=source.flow_rate, tunnels=tunnels, label=source.label))

    origin = tuple(network.origin[old] for old in kept)
    return Network(valves=valves, start=0, origin=origin)
