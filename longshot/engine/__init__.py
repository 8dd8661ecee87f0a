"""Pure sniping logic: outcomes, matching, shared state."""
