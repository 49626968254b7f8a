"""Allow ``python -m frontdoor``."""

from frontdoor.cli import main

main()
