"""Contact form backend: submission endpoint, owner notifications and a small admin surface."""

__version__ = "1.0.0"
