"""Significance testing primitives."""
