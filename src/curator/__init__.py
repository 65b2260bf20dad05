"""curator — inbox filing, undo, and correction learning for a markdown vault."""

__version__ = "0.3.0"
