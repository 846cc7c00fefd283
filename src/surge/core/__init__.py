"""Core types, constants, configuration and errors."""
