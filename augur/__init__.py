"""Augur: Agentic research analyst for binary prediction markets."""

__version__ = "0.1.0"
__author__ = "Augur Team"

__all__ = ["__version__", "__author__"]
