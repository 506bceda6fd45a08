"""ikagent - per-branch Docker dev environments."""

__version__ = "0.1.0"
