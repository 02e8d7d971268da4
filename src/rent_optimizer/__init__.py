"""
Package marker for source code under `src.rent_optimizer`.
It groups the unit pricing engine modules under a stable import path.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
