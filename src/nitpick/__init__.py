"""Nitpick - browse pull-request review comments and turn them into prompts."""

__version__ = "0.1.0"
