"""Command handling utilities for jenkins.

This package provides:
- models: Data structures (ValueKind variants, FlagSpec, PositionalSpec, CommandNode)
- parsing: Docstring and command name parsing
- discovery: Command declarations and argument classification
- tree: Hierarchical command tree building and lookup
"""
