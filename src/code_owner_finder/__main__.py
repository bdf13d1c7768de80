"""Entry-point for ``python -m code_owner_finder``."""

from code_owner_finder.cli import main

if __name__ == "__main__":
    main()
