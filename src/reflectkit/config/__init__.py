"""Ambient configuration: settings discovery and logging setup."""
