"""Pure domain rules (normalization, account validation)."""
