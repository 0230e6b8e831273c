"""Business logic layer: embedding routing, ingestion, retrieval and the
operation facade.  Services depend on interfaces, never on concrete
providers; :mod:`sciorag.main` does the wiring.
"""
