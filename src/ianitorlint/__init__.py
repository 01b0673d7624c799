"""ianitorlint - structural complexity checks for TypeScript type declarations.

This package scores the type expressions of a parsed TypeScript file
(ESTree JSON) and reports declarations complex enough to need an explicit
``Ianitor.Check<T>`` runtime-validation annotation.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
