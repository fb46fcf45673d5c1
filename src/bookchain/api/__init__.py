"""HTTP boundary for the checkout chain."""
