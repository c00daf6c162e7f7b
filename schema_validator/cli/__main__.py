
"""Module entrypoint for `python -m schema_validator.cli`.

Delegates to the validator CLI implementation.
"""

from .run_validate import run


if __name__ == "__main__":
    run()
