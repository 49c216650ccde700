"""Console rendering and prompt input helpers for the library CLI."""
