"""Shared utilities: logging, console output, and UTC time helpers."""
