"""Executable entrypoint for `python -m cfgforge`.

Delegates directly to :func:`cfgforge.cli.main`.
"""

from cfgforge.cli import main

if __name__ == "__main__":
    main()
