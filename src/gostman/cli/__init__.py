"""Gostman command-line interface."""
