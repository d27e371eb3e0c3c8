"""CLI entry point for python -m veogen"""
from veogen.cli.commands import app

if __name__ == "__main__":
    app()
