"""rednext - schema-driven collections of to-do style items.

Collections are stored locally in SQLite files or on a remote rednext
server; both backends implement the same catalog and collection interface.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
