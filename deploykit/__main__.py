"""Allow ``python -m deploykit``."""

from deploykit.main import run

if __name__ == "__main__":
    run()
