"""Allow running rednext as a module: python -m rednext."""

from rednext.cli import main

if __name__ == "__main__":
    main()
