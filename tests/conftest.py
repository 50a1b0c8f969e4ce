"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

if "LZ4STREAM_LEVEL" not in os.environ:
    os.environ["LZ4STREAM_LEVEL"] = "-1"

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
