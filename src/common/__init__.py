"""
Package marker for source code under `src.common`.
It groups process-wide settings and logging helpers shared by optimizer entrypoints.
"""
