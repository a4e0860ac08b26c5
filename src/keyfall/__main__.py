"""``python -m keyfall``: same behaviour as the ``keyfall`` script."""

from keyfall.cli.app import cli

if __name__ == "__main__":
    cli()
