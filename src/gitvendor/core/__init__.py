"""Core libraries for gitvendor (config, process execution, cascade)."""
