"""
Network model for valve search.

A network is a list of valves (dense integer indices) joined by undirected
tunnels, each with a step distance, plus the index of the start valve.
Opened valves are tracked in an OpenedSet: a fixed-capacity bit set over the
flow-producing valves of a network.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


# Opened-sets are packed into a single 64-bit word (also the numpy dtype used
# when combining them), so no network may have more flow valves than this.
OPENED_SET_CAPACITY = 64


class CapacityError(ValueError):
    """Raised when an opened-set cannot represent a network's flow valves."""


@dataclass
class Valve:
    """Single room in the network."""
    flow_rate: int
    tunnels: List[Tuple[int, int]] = field(default_factory=list)  # (neighbor, distance)
    label: Optional[str] = None

    def distance_to(self, neighbor):
        for to, dist in self.tunnels:
            if to == neighbor:
                return dist
        return None


@dataclass
class Network:
    """Valves plus the start index; `origin` maps each valve back to its
    index in the network it was derived from (identity for parsed input)."""
    valves: List[Valve]
    start: int
    origin: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        if self.origin is None:
            self.origin = tuple(range(len(self.valves)))

    def __len__(self):
        return len(self.valves)

    def flow_valves(self):
        """Indices of valves with nonzero flow, ascending."""
        return [i for i, valve in enumerate(self.valves) if valve.flow_rate > 0]

    def bit_positions(self):
        """Opened-set bit for every valve, None for zero-flow valves. Not cached."""
        positions = [None] * len(self.valves)
        for bit, index in enumerate(self.flow_valves()):
            positions[index] = bit
        return positions

    def bit_of(self, index):
        """Bit position of a flow valve in this network's opened-sets."""
        return self.bit_positions()[index]

    @property
    def capacity(self):
        return len(self.flow_valves())

    def distance(self, a, b):
        return self.valves[a].distance_to(b)

    def edges(self):
        """Set of (a, b, distance) with a < b."""
        result = set()
        for a, valve in enumerate(self.valves):
            for b, dist in valve.tunnels:
                result.add((min(a, b), max(a, b), dist))
        return result

    def copy(self):
        valves = [Valve(v.flow_rate, list(v.tunnels), v.label) for v in self.valves]
        return Network(valves, self.start, self.origin)

    def validate(self):
        """
        Check structural invariants: start in range, edge endpoints in range,
        positive distances, symmetric edges. Raises ValueError on the first
        violation.
        """
        n = len(self.valves)
        if not 0 <= self.start < n:
            raise ValueError(f"start valve {self.start} out of range for {n} valves")
        for a, valve in enumerate(self.valves):
            if valve.flow_rate < 0:
                raise ValueError(f"valve {a} has negative flow rate {valve.flow_rate}")
            for b, dist in valve.tunnels:
                if not 0 <= b < n:
                    raise ValueError(f"valve {a} has tunnel to unknown valve {b}")
                if dist <= 0:
                    raise ValueError(f"tunnel {a}->{b} has non-positive distance {dist}")
                if self.valves[b].distance_to(a) != dist:
                    raise ValueError(f"tunnel {a}->{b} (distance {dist}) is not symmetric")
        return self


class OpenedSet:
    """
    Immutable set of opened valves, one bit per flow valve.

    Bits are positions 0..capacity-1 as assigned by Network.bit_of, not valve
    indices. Capacity is checked at construction and on every insert.
    """

    __slots__ = ('_mask', '_capacity')

    def __init__(self, capacity, mask=0):
        if capacity < 0 or capacity > OPENED_SET_CAPACITY:
            raise CapacityError(
                f"opened-set capacity {capacity} exceeds the supported "
                f"maximum of {OPENED_SET_CAPACITY} flow valves"
            )
        if mask < 0 or mask >> capacity:
            raise CapacityError(f"mask {mask:#x} does not fit in {capacity} bits")
        self._mask = mask
        self._capacity = capacity

    @classmethod
    def for_network(cls, network):
        return cls(network.capacity)

    @property
    def mask(self):
        return self._mask

    @property
    def capacity(self):
        return self._capacity

    def add(self, bit):
        if not 0 <= bit < self._capacity:
            raise CapacityError(f"bit {bit} outside opened-set capacity {self._capacity}")
        return OpenedSet(self._capacity, self._mask | (1 << bit))

    def isdisjoint(self, other):
        return self._mask & other.mask == 0

    def __contains__(self, bit):
        return 0 <= bit < self._capacity and bool(self._mask >> bit & 1)

    def __or__(self, other):
        return OpenedSet(max(self._capacity, other.capacity), self._mask | other.mask)

    def __iter__(self):
        mask = self._mask
        bit = 0
        while mask:
            if mask & 1:
                yield bit
            mask >>= 1
            bit += 1

    def __len__(self):
        return bin(self._mask).count('1')

    def __eq__(self, other):
        if not isinstance(other, OpenedSet):
            return NotImplemented
        return self._mask == other.mask

    def __hash__(self):
        return hash(self._mask)

    def __repr__(self):
        return f"OpenedSet({sorted(self)}, capacity={self._capacity})"
