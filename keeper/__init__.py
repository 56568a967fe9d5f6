"""Merges trusted dependency update pull requests once GitHub reports them clean."""

__version__ = "0.1.0"
