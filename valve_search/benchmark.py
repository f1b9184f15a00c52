"""
Timed runner: parse a scan report, solve both parts, print the results.

Usage:
    python -m valve_search.benchmark                 # bundled example network
    python -m valve_search.benchmark path/to/input   # custom input
"""

import sys
import time
import argparse

from valve_search.network import CapacityError
from valve_search.parsing import EXAMPLE_PATH, NetworkParseError, load_network
from valve_search.solvers import (
    PART_ONE_MINUTES, PART_TWO_MINUTES, solve_dual_actor, solve_single_actor,
)


def time_solve(fn, *args, **kwargs):
    """Run fn and return (result, elapsed seconds)."""
    t0 = time.perf_counter()
    result = fn(*args, **kwargs)
    return result, time.perf_counter() - t0


def solve_file(path, part_one_minutes=PART_ONE_MINUTES,
               part_two_minutes=PART_TWO_MINUTES, verbose=False):
    """
    Load `path` and solve both parts.

    Returns a dict with part_one, part_two, part_one_time, part_two_time.
    Each part compacts the parsed network on its own.
    """
    network = load_network(path)
    part_one, part_one_time = time_solve(
        solve_single_actor, network, part_one_minutes, verbose=verbose)
    part_two, part_two_time = time_solve(
        solve_dual_actor, network, part_two_minutes, verbose=verbose)
    return {
        'part_one': part_one,
        'part_two': part_two,
        'part_one_time': part_one_time,
        'part_two_time': part_two_time,
    }


def format_solution(result, elapsed):
    return f"  Solution: {result}\n  Elapsed:  {elapsed} seconds\n"


def main(argv=None):
    parser = argparse.ArgumentParser(description='Solve a valve network scan report')
    parser.add_argument('input', nargs='?', default=EXAMPLE_PATH,
                        help='Scan report path (defaults to the bundled example)')
    parser.add_argument('--part-one-minutes', type=int, default=PART_ONE_MINUTES)
    parser.add_argument('--part-two-minutes', type=int, default=PART_TWO_MINUTES)
    parser.add_argument('--verbose', action='store_true',
                        help='Print explorer progress')
    args = parser.parse_args(argv)

    print(f"opening {args.input}")
    try:
        results = solve_file(
            args.input,
            part_one_minutes=args.part_one_minutes,
            part_two_minutes=args.part_two_minutes,
            verbose=args.verbose,
        )
    except (OSError, NetworkParseError) as e:
        print(f"[ERROR] failed to load {args.input}: {e}", file=sys.stderr)
        return 2
    except CapacityError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print("Part one:")
    print(format_solution(results['part_one'], results['part_one_time']))
    print("Part two:")
    print(format_solution(results['part_two'], results['part_two_time']))
    return 0


if __name__ == '__main__':
    sys.exit(main())
