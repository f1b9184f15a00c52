"""
Parse valve scan reports into a Network.

Each line reads:

    Valve AA has flow rate=0; tunnels lead to valves DD, II, BB
    Valve HH has flow rate=22; tunnel leads to valve GG

Labels become dense indices in line order and every tunnel becomes an
undirected edge of distance 1. The valve labelled AA is the start.
"""

import os
import re

from valve_search.network import Network, Valve

START_LABEL = 'AA'

LINE_RE = re.compile(
    r"^Valve (?P<label>[A-Z]{2}) has flow rate=(?P<flow>\d+); "
    r"tunnels? leads? to valves? (?P<tunnels>[A-Z]{2}(?:, [A-Z]{2})*)$"
)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
EXAMPLE_PATH = os.path.join(DATA_DIR, "example_network.txt")


class NetworkParseError(ValueError):
    """Malformed scan report."""

    def __init__(self, message, line_number=None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def parse_network(lines):
    """
    Build a Network from an iterable of report lines.

    Tunnels may name valves that appear later in the report; they are
    resolved once every label is known. Blank lines are ignored.

    Raises:
        NetworkParseError: malformed line, duplicate label, unknown tunnel
            target, or no valve labelled AA.
    """
    records = []
    label_to_index = {}
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        match = LINE_RE.match(line)
        if match is None:
            raise NetworkParseError(f"cannot parse {line!r}", line_number)
        label = match.group('label')
        if label in label_to_index:
            raise NetworkParseError(f"duplicate valve {label}", line_number)
        label_to_index[label] = len(records)
        targets = match.group('tunnels').split(', ')
        records.append((line_number, label, int(match.group('flow')), targets))

    if START_LABEL not in label_to_index:
        raise NetworkParseError(f"no start valve {START_LABEL}")

    valves = [Valve(flow_rate=flow, label=label) for _, label, flow, _ in records]
    for i, (line_number, label, _, targets) in enumerate(records):
        for target in targets:
            j = label_to_index.get(target)
            if j is None:
                raise NetworkParseError(
                    f"valve {label} has a tunnel to unknown valve {target}", line_number)
            if j == i:
                continue
            # Tunnels are usually listed from both ends; keep one edge.
            if valves[i].distance_to(j) is None:
                valves[i].tunnels.append((j, 1))
                valves[j].tunnels.append((i, 1))

    return Network(valves=valves, start=label_to_index[START_LABEL])


def load_network(path):
    """Read and parse a scan report file."""
    with open(path, "r", encoding="utf-8") as f:
        return parse_network(f)


def load_example_network():
    """The bundled 10-valve reference network."""
    return load_network(EXAMPLE_PATH)
