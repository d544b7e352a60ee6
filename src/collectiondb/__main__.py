"""Entry point for 'python -m collectiondb' command."""

from collectiondb.cli import main

if __name__ == "__main__":
    main()
