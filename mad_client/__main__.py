"""Allow ``python -m mad_client``."""

from mad_client.interfaces.cli.cli import main


if __name__ == "__main__":
    main()
