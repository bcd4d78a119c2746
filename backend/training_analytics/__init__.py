"""Group Training Analytics - attendance analytics for Zoezi group training classes."""

__version__ = "1.0.0"
