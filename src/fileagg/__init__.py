"""
File Aggregator - combine the files of a directory tree into one text blob.

This package walks a directory tree, selects files based on hidden-file
policy, ignore-file rules and an optional extension allowlist, and joins their
contents under per-file comment headers so the result can be written to a
file, printed, or copied to the clipboard.
"""

__version__ = "1.0.0"
__author__ = "File Aggregator Team"
