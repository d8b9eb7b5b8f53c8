"""Command line interface for convmd."""
