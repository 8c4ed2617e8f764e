"""Router constants.

Centralizes fixed-point scales and the defaults used to size probe quotes
and bound the rate graph.
"""

import math

# Fixed-point scale for rates: amount_out * SCALE // amount_in
SCALE = 10**18

# Q128.128 fixed point used by the log2 routine
Q128_FRACTIONAL_BITS = 128
Q128_ONE = 1 << Q128_FRACTIONAL_BITS

# Whole units of the input asset used to sample a venue's rate
PROBE_UNITS = 100

# Upper bound on registry size. solve() is O(N^3) in the worst case
# (N passes over N^2 edges), so the graph refuses to grow past this.
MAX_ASSETS = 64

# Cost of an edge with no liquidity. Compares greater than any int cost.
INF_COST = math.inf

# Stands in for "no venue" in rate matrices and paths
NULL_VENUE = None

# Account the router executes from (holds funds only within a call)
ROUTER_ADDRESS = "0x5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c"

UINT256_MAX = 2**256 - 1
