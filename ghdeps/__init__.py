"""
ghdeps — Use GitHub releases and repositories as build dependencies.

Keeps local mirrors of resource repositories in sync, resolves release
versions to cached jar files, and bumps declared dependency versions in
build files.
"""

__version__ = "1.0.0"
