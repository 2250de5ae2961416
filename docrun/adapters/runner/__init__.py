"""Runner adapters for evaluating extracted doctests.

Implementations:
- Subprocess (one evaluator process per doctest, e.g. node)
"""
