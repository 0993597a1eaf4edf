"""Allow running as `python -m svcinstall`."""

from svcinstall.cli.app import main

main()
