"""Switch git working trees between branches with typed progress reporting."""

__version__ = "0.3.0"
