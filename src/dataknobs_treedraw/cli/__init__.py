"""Command line interface for dataknobs-treedraw."""

from dataknobs_treedraw.cli.main import cli

__all__ = ["cli"]
