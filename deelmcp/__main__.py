"""Main entry point when executing deelmcp as a package.

This allows running the package using python -m deelmcp.
"""

from deelmcp.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
