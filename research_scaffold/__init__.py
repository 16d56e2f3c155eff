"""Scaffolding for reproducible research projects.

This package contains:
- An idempotent materializer that never clobbers user edits
- Pure renderers for every generated project and study file
- A README section patcher that keeps the study index current
- A thin git wrapper and CLI front end
"""

__version__ = "0.3.0"
