"""Allow ``python -m devbootstrap``."""

from devbootstrap.main import cli

if __name__ == "__main__":
    cli()
