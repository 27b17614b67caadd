"""Driver implementations of the hexhost ports."""
