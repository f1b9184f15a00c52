"""
Valve search: maximum pressure release over a network of tunnel-connected
valves.

This package compacts the tunnel graph down to the flow-producing valves,
explores (valve, opened-set, time-left) states with dominance pruning, and
pairs disjoint opened-sets to solve the two-actor variant.
"""
