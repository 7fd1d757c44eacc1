"""Click commands registered on the `ghdeps` group in ghdeps.main."""
