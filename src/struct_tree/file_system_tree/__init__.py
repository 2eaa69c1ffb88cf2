"""Filesystem traversal and rendering.

This package builds filtered tree representations of directory structures, searches
them by name, and renders both as connector-based text trees.
"""
