"""Step trace recorder for Given/When/Then scenarios."""

__version__ = "0.1.0"
