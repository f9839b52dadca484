"""todotree - hierarchical prioritized todo lists stored as plain text."""

__version__ = "0.1.0"
