"""Console script entry point with production wiring.

Sits at package level, outside the adapters, so composition can be wired
into the CLI without the adapters importing the composition root.
"""

from __future__ import annotations

from .adapters.cli.main import main as cli_main
from .composition import build_production


def main() -> int:
    """Run the ``mailchannels-client`` console script with production services."""
    return cli_main(services_factory=build_production)


__all__ = ["main"]
