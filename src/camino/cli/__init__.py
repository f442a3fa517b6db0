"""Command-line helpers for Camino."""
