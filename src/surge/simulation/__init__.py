"""Simulation driver."""
