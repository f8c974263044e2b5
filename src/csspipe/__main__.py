"""Entry point for `python -m csspipe`."""

from csspipe.cli.app import app


def main() -> None:
    """Invoke the CLI application."""

    app()


if __name__ == "__main__":
    main()
