"""SNA Lab: edge-list normalization and network analysis for SNA teaching."""

__version__ = "0.1.0"
