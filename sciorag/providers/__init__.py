"""Concrete adapters for the interfaces in :mod:`sciorag.interfaces`."""
