"""Textual map inspector."""
