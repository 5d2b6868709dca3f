"""Entry point for the indicator scanner CLI.

Keeps `python -m binscan.api.indicators` aligned with the `binscan` console
script.
"""

from . import cli


if __name__ == "__main__":
    # Use SystemExit to propagate CLI return codes to calling shells.
    raise SystemExit(cli.main())
