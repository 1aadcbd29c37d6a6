"""Core configuration, constants, errors, logging and result types."""
