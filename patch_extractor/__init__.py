"""Fixed-size image patch extraction for feature-extraction models."""

__version__ = "0.1.0"
