"""Allow ``python -m sciorag.cli`` execution."""

from sciorag.cli.documents import main

main()
