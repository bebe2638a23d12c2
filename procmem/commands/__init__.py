"""CLI subcommands for procmem."""
