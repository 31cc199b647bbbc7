"""Package entry point.

Allows running the CLI as: python -m qcbuddy
"""

from qcbuddy.cli.main import cli_main

if __name__ == "__main__":
    cli_main()
