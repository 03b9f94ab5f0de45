"""
starbounty: fee distribution and pool bootstrap kernels for a token launch.

- `core/` holds the pure, integer-only engines (distribution, liquidity, pricing).
- `state/` holds the small persistent records the engines read and advance.
- `integration/` wires the engines to external AMM / vesting / ledger clients.
"""

__version__ = "0.1.0"
