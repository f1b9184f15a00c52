#!/usr/bin/env python3
"""
Valve Search Experiment Runner
==============================
Solves the single-actor and dual-actor variants for every scan report listed
in experiments/config.yaml and records answers, timings and explorer stats.
Saves results incrementally.

Usage:
    python experiments/run_experiments.py                          # run from config
    python experiments/run_experiments.py --input my_scan.txt      # override inputs
    python experiments/run_experiments.py --config my.yaml         # custom config

Results saved to: experiments/results/<timestamp>/
"""

import os
import sys
import json
import time
import argparse
import datetime
import copy

# Ensure project root is on path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

import yaml

from valve_search.compaction import compact_network
from valve_search.explorer import explore
from valve_search.network import CapacityError
from valve_search.parsing import EXAMPLE_PATH, NetworkParseError, load_network
from valve_search.solvers import (
    PART_ONE_MINUTES, PART_TWO_MINUTES, combine_disjoint_sets,
)


# ---------------------------------------------------------------------------
# Defaults (used if config.yaml missing or incomplete)
# ---------------------------------------------------------------------------
DEFAULTS = {
    'output_dir': 'experiments/results',
    'save_incremental': True,
    'verbose': False,
    'inputs': [os.path.relpath(EXAMPLE_PATH, PROJECT_ROOT)],
    'parts': {
        'part_one': {'enabled': True, 'minutes': PART_ONE_MINUTES},
        'part_two': {'enabled': True, 'minutes': PART_TWO_MINUTES},
    },
}


def load_config(config_path):
    """Load YAML config, falling back to defaults for missing keys."""
    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            cfg = yaml.safe_load(f) or {}
    else:
        print(f"[WARN] Config not found at {config_path}, using defaults.")
        cfg = {}

    # Merge with defaults
    for key, default_val in DEFAULTS.items():
        if key not in cfg:
            cfg[key] = copy.deepcopy(default_val)
        elif isinstance(default_val, dict):
            for sub_key, sub_val in default_val.items():
                if sub_key not in cfg[key]:
                    cfg[key][sub_key] = copy.deepcopy(sub_val)

    # Ensure both part sections have every key
    for part, part_defaults in DEFAULTS['parts'].items():
        for k, v in part_defaults.items():
            cfg['parts'][part].setdefault(k, v)

    return cfg


def fmt_time(seconds):
    """Format seconds as human-readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{seconds/60:.1f}m"
    else:
        return f"{seconds/3600:.1f}h"


def resolve_path(path):
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------

def run_input(path, cfg):
    """
    Solve the enabled parts for one scan report.

    Returns a result record; on a load, capacity or budget failure the record
    carries an 'error' string instead of answers.
    """
    record = {'input': path}
    try:
        _solve_into(record, path, cfg)
    except (OSError, NetworkParseError, CapacityError, ValueError) as e:
        # Drop partial answers so a failed input has only input and error.
        record = {'input': path, 'error': f"{type(e).__name__}: {e}"}
    return record


def _solve_into(record, path, cfg):
    network = load_network(resolve_path(path))
    compacted = compact_network(network)

    record['valves'] = len(network)
    record['flow_valves'] = compacted.capacity
    verbose = cfg['verbose']

    part_one = cfg['parts']['part_one']
    if part_one['enabled']:
        t0 = time.time()
        result = explore(compacted, part_one['minutes'], verbose=verbose)
        record['part_one'] = result.best_pressure
        record['part_one_time'] = time.time() - t0
        record['part_one_stats'] = result.stats

    part_two = cfg['parts']['part_two']
    if part_two['enabled']:
        t0 = time.time()
        result = explore(compacted, part_two['minutes'], track_opened_sets=True,
                         verbose=verbose)
        record['part_two'] = combine_disjoint_sets(result.best_by_opened)
        record['part_two_time'] = time.time() - t0
        record['part_two_stats'] = dict(result.stats,
                                        opened_sets=len(result.best_by_opened))

    return record


def save_results(output_dir, records, cfg):
    summary = {
        'timestamp': os.path.basename(output_dir),
        'config': cfg,
        'results': records,
    }
    summary_path = os.path.join(output_dir, 'results.json')
    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2)
    return summary_path


def print_table(records):
    """Print formatted summary table."""
    print(f"\n{'='*85}")
    print(f"{'Input':<36} | {'Flow':>4} | {'Part one':>9} | {'Time':>7} | {'Part two':>9} | {'Time':>7}")
    print(f"{'-'*36}-+{'-'*6}+{'-'*11}+{'-'*9}+{'-'*11}+{'-'*9}")
    for r in records:
        name = os.path.basename(r['input'])
        if 'error' in r:
            print(f"{name:<36} | {r['error']}")
            continue
        p1 = r.get('part_one', '-')
        p2 = r.get('part_two', '-')
        t1 = fmt_time(r['part_one_time']) if 'part_one_time' in r else '-'
        t2 = fmt_time(r['part_two_time']) if 'part_two_time' in r else '-'
        print(f"{name:<36} | {r['flow_valves']:>4} | {p1:>9} | {t1:>7} | {p2:>9} | {t2:>7}")
    print(f"{'='*85}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Valve Search Experiment Runner: both parts over many scan reports'
    )
    parser.add_argument('--config', type=str,
                        default=os.path.join(PROJECT_ROOT, 'experiments', 'config.yaml'),
                        help='Path to config YAML')
    parser.add_argument('--input', action='append', default=None,
                        help='Scan report to solve (repeatable, overrides config inputs)')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Override output directory')
    parser.add_argument('--verbose', action='store_true',
                        help='Print explorer progress')
    args = parser.parse_args(argv)

    cfg = load_config(args.config)

    # Apply CLI overrides
    if args.input:
        print(f"[CLI override] inputs = {args.input}")
        cfg['inputs'] = list(args.input)
    if args.output_dir is not None:
        print(f"[CLI override] output_dir = {args.output_dir}")
        cfg['output_dir'] = args.output_dir
    if args.verbose:
        cfg['verbose'] = True

    timestamp = datetime.datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
    output_dir = os.path.join(resolve_path(cfg['output_dir']), timestamp)
    os.makedirs(output_dir, exist_ok=True)

    # Save config copy
    config_copy_path = os.path.join(output_dir, 'config_used.yaml')
    with open(config_copy_path, 'w') as f:
        yaml.dump(cfg, f, default_flow_style=False)

    # Header
    print()
    print("=" * 60)
    print("  Valve Search Experiment Runner")
    print("=" * 60)
    print(f"  Config:     {args.config}")
    print(f"  Output:     {output_dir}")
    print(f"  Inputs:     {len(cfg['inputs'])}")
    print(f"  Started:    {timestamp}")
    print("=" * 60)

    experiment_start = time.time()
    records = []
    for i, path in enumerate(cfg['inputs']):
        print(f"\n--- Running: {path} ({i+1}/{len(cfg['inputs'])}) ---")
        record = run_input(path, cfg)
        records.append(record)
        if 'error' in record:
            print(f"  [ERROR] {record['error']}")
        else:
            if 'part_one' in record:
                print(f"  => Part one: {record['part_one']} "
                      f"in {fmt_time(record['part_one_time'])}")
            if 'part_two' in record:
                print(f"  => Part two: {record['part_two']} "
                      f"in {fmt_time(record['part_two_time'])}")
        if cfg['save_incremental']:
            save_results(output_dir, records, cfg)
            print(f"  [saved incrementally]")

    total_time = time.time() - experiment_start
    print(f"\n\nAll runs completed in {fmt_time(total_time)}.")

    print_table(records)

    save_results(output_dir, records, cfg)
    print(f"\nResults saved to: {output_dir}/")
    print(f"  results.json        - per-input answers and explorer stats")
    print(f"  config_used.yaml    - config snapshot")
    return 0


if __name__ == '__main__':
    sys.exit(main())
