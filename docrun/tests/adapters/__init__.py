"""Integration tests for adapter implementations.

These tests verify that adapters correctly implement core port interfaces
against temporary project directories and patched subprocess calls.
"""
