"""Formatting, parsing, logging and error helpers."""
