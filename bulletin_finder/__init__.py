"""Search legal bulletins while keeping each row's court and state context."""

__version__ = "0.3.0"
