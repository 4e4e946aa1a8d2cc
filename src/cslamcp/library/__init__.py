"""Keyword search and fetch over the example corpus."""
