"""Module entrypoint for `python -m schema_validator`."""

from .cli.run_validate import run


if __name__ == "__main__":
    run()
