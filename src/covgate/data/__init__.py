"""Packaged JSON schemas for covgate input and output."""
