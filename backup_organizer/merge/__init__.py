"""Folder merge with destination priority."""
