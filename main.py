"""Run oxidoc from a source checkout."""

from oxidoc.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
