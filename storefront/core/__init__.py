"""Core configuration, errors, logging and wiring."""
