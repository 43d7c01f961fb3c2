"""CLI command plugins; each module exposes a top-level ``cli``."""
