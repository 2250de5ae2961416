"""Program adapters for loading a program's linked documentation.

Implementations:
- Linked JSON (a linked code-to-json document on disk)
- Command (an external command printing the linked document)
"""
