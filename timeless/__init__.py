"""Timeless licensing marketplace backend."""
