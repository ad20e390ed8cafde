"""In-app purchase event logging: dedup ledger, transaction logger, parameter shaping."""
