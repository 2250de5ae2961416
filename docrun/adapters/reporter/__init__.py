"""Reporter adapters for presenting doctest results.

Implementations:
- Stdout (terminal report, one line per file and symbol)
"""
