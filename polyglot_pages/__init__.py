"""Turn single-language HTML pages into a static multilingual site.

The package implements a four-stage pipeline: extraction (pages to templates
plus a source dictionary), translation of the dictionary into sibling
locales, rendering of every page for every locale, and verification of the
rendered tree.

Exports
-------
- ``app``: Cyclopts application holding the subcommands.
- ``main``: Convenience function that invokes the app.

Examples
--------
>>> from polyglot_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
