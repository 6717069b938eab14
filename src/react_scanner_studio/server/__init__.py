"""Local dashboard server for React Scanner Studio."""
