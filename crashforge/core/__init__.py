"""Core components: manifest parsing, tool location, subprocess runners."""
