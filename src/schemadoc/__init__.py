"""Command line entry point for database-type lookup and remote-table linking."""
