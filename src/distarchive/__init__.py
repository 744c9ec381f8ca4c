"""
Dist Archive - build distribution archives from a project's .distignore.

This package reads a project's ``.distignore`` file, translates its entries
into exclude patterns for ``zip`` or ``tar``, discovers a version string from
source docblocks, ``composer.json`` or git, and invokes the archiver.
"""

__version__ = "0.1.0"
__author__ = "Dist Archive Team"
