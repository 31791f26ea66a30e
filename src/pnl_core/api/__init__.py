"""HTTP API serving PnL reports."""
