"""CLI subcommands for verbump."""
