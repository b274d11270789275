"""Simulation layer: RNG streams, buff ledger, and game flow."""
