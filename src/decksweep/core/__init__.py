"""Scanning, matching and deletion logic."""
