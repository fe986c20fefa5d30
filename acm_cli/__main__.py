"""console script entrypoint for the ACM CLI."""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
