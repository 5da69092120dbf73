#!/usr/bin/env python
"""
Launcher script for Label Forge.

Usage from repo root:
    python run_label_forge.py

Alternative:
    python -m label_forge
"""
from label_forge.app import main

if __name__ == "__main__":
    main()
