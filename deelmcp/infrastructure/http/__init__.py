"""HTTP adapters for the Deel REST API."""
