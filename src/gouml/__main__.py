"""Entry point for running gouml as a module.

Usage:
    python -m gouml [command] [options]

Example:
    python -m gouml generate ./service -o model.json
    python -m gouml upload model.json --url https://dc.example.com/api/uploads
"""

from gouml.cli import app

if __name__ == "__main__":
    app()
