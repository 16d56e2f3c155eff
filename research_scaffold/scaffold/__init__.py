"""Research project and study scaffolding.

Writes the project skeleton and per-study folders to disk. It is
non-destructive by default: existing files are never overwritten unless the
caller asks for it.
"""
