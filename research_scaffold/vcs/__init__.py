"""Minimal git integration: init, add and commit only."""
