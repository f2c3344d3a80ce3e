"""Public package surface for lazypicker.

Exports ``main`` for programmatic CLI invocation.
The tree state engine lives in ``lazypicker.tree_model`` and
``lazypicker.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
