"""
MovR Synthetic Data Generation

Deterministic, stateless row generation for the MovR ride-sharing schema.
Any row of any table can be rebuilt from the global seed, its row index and the
configured table sizes, so datasets of arbitrary scale can be produced in
parallel without keeping a generation log.
"""

__version__ = "1.0.0"
