"""NYC incident replay: NYC Open Data proxy, normalizer and playback."""

__version__ = "1.0.0"
