"""Allow ``python -m react_scanner_studio``."""

from .cli import main

main()
