"""Embedding generation for the example corpus."""
