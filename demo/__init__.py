"""Demo drivers for the broker."""
