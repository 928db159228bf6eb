# File: entigen/__main__.py
"""
Entigen: module entry point.

Allows running the compiler directly via::

    python -m entigen --schema shop.yaml --output ./generated
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from entigen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
