"""
Entry point for running MJ-Toolbox as a module.

Usage:
    python -m mjtoolbox --help
    python -m mjtoolbox analyze "A cat. --ar 16:9"
    python -m mjtoolbox translate "A cat. A dog!" --backend echo
"""
from .cli import app


if __name__ == "__main__":
    app()
