"""Shorts Factory - generates and publishes vertical short videos."""

__version__ = "0.1.0"
