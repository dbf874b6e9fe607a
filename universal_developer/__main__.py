"""Run with: python -m universal_developer"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
