"""
Entry point for running unixsvc as a module: python -m unixsvc
"""

from unixsvc.cli.commands import run

if __name__ == "__main__":
    run()
