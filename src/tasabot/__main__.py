# src/tasabot/__main__.py
"""Module entry point: python -m tasabot"""

from tasabot.app import main

if __name__ == "__main__":
    main()
