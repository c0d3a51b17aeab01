"""Concatenate files and directories into a single prompt for use with LLMs."""

__version__ = "0.1.0"
