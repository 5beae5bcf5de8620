"""
RL Algorithm Modules.

Each algorithm is self-contained in algorithms/<name>/ with run.py as its
entry point.
"""
