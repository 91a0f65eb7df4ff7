"""Restaurant register: composite meals, order ledger and inventory settlement."""
