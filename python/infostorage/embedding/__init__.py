"""Embedding primitives: delay embedding and automatic (k, tau) selection."""
