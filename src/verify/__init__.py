"""Report reproducibility checks."""
