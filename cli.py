"""CLI entry point - wrapper for running from a checkout

Equivalent to the installed `podcast-tracker` console script.
"""

from cli.main import main

if __name__ == "__main__":
    main()
