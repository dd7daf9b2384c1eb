"""Manifest parsing, option handling, configuration and rustup checks for finding a crate's MSRV."""

__version__ = "0.1.0"