"""Frame, station and checkpoint input/output."""
