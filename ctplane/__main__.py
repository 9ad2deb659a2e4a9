"""
Punto de entrada: python -m ctplane
"""

from ctplane.cli.app import main

if __name__ == "__main__":
    main()
