"""Wrap the text files of a folder in path tags for pasting into a chat assistant."""

__version__ = "0.1.0"
