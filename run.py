"""
Root entry point for the Wellness Profile Engine.
Bootstraps the wellness_engine package and runs the CLI.
"""

import sys
import os

# Ensure the project root is in python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from wellness_engine.main import main

if __name__ == "__main__":
    sys.exit(main())
