"""Paper: keeps a Slack channel canvas up to date with conversation summaries."""

__version__ = "0.1.0"
