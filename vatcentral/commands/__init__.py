"""Click command groups for the vatcentral CLI."""
