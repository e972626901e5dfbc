"""Entry point for running logvalues as a module.

Usage:
    python -m logvalues [command] [options]

Example:
    python -m logvalues render "Hello {Name}!" World
    python -m logvalues parse "{Count,5:D2} items"
"""

from logvalues.cli import app

if __name__ == "__main__":
    app()
