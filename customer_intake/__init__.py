"""Customer intake: validated customer registration over a tabular record store."""

__version__ = "0.1.0"
