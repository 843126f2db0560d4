"""Offline indexer and fuzzy finder for Rust crate documentation."""

__version__ = "0.1.0"
