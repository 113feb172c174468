"""Operator dashboard for camera-based parking and foot traffic monitoring."""

__version__ = '0.1.0'
