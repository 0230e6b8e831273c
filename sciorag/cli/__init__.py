# =============================================================================
# sciorag/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Command-line access to the document operations for operators running the
# engine outside a deployed API.  Run with `python -m sciorag.cli <command>`.
#
#   import      Import every file filed under one topic
#   preprocess  Import every file under every configured source root
#   topics      List predefined and discovered topics
#   provider    Show or change the configured provider
#   retrieve    Print the best-matching snippets for a query
#
# Results are printed to stdout as JSON; logs go to stderr.
# =============================================================================

"""CLI tools for sciorag.

- ``python -m sciorag.cli``: corpus import, topics, provider selection and
  retrieval (see :mod:`sciorag.cli.documents`).
"""
