"""docrun: run the examples in a program's documentation comments as tests."""

__version__ = "0.1.0"
