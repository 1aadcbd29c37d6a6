"""Tabular file loaders used by the command line."""
