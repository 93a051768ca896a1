"""ClimateSense services."""
