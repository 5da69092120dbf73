"""
Module entrypoint for `python -m label_forge`.
"""
from label_forge.app import main

if __name__ == "__main__":
    main()
