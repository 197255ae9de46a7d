"""ccpulse: session and usage analytics for Claude Code data."""

__version__ = "0.1.0"
