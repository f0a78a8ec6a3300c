"""CLI package.

The ``cli`` sub-package contains the Click application.  Commands delegate
to ``plandoc.commands`` and print the returned payload as JSON.
"""
from __future__ import annotations
