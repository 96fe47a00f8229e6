"""Domain services for SpendSmart."""
