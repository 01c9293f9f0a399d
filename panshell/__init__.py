"""Building blocks for an interactive cloud-drive command shell."""

__version__ = "0.1.0"