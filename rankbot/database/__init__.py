"""Ranking store access."""
