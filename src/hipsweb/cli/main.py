"""
hipsweb CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import cascade, centrality, corridors, layout, path, stats


@click.group()
@click.version_option(package_name="hipsweb")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """hipsweb: Explore the HIPs multi-hazard causal network.

    Classifies every causal link as declared (both hazards agree) or
    inferred (one-sided), and computes the bundle, orbital and cascade
    views of the network.

    \b
    Quick Start:
      hipsweb stats -s data/hips.json
      hipsweb cascade TL0405 --depth 2
      hipsweb layout bundle -o bundle.json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(stats.stats)
main.add_command(cascade.cascade)
main.add_command(layout.layout)
main.add_command(corridors.corridors)
main.add_command(path.path)
main.add_command(centrality.centrality)

if __name__ == "__main__":
    main()
