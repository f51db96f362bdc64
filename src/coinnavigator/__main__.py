"""Entry point for 'python -m coinnavigator' command."""

from coinnavigator.cli import main

if __name__ == "__main__":
    main()
