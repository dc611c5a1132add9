"""Entry point for python -m complink"""

from complink.cli import main

if __name__ == "__main__":
    main()
