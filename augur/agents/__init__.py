"""Agents that drive the reasoning model."""
