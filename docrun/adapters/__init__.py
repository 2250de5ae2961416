"""External adapters for the docrun doctest runner.

This package contains all external dependencies (package descriptors,
linked documentation, evaluator processes, the terminal) and provides
implementations of the core port interfaces.

Adapter Organization:

- package/: Adapters for locating the package descriptor (package.json)
- program/: Adapters for loading linked documentation (JSON file, command)
- runner/: Adapters for evaluating doctests (subprocess)
- reporter/: Adapters for reporting results (stdout)
"""
