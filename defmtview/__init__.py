"""Format-string parsing, argument values, frame rendering and logging integration for compact firmware log frames."""

__version__ = "0.1.0"