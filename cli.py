"""CLI entry point - wrapper so ``python cli.py`` runs the cli package"""

from cli.main import main

if __name__ == "__main__":
    main()
