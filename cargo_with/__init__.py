"""Run cargo build artifacts through external tools."""

__version__ = "0.4.0"
