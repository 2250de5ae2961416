"""Package locator adapters for finding a program's package descriptor.

Implementations:
- Node (nearest package.json)
"""
