"""Logging utilities for shapeguard."""
