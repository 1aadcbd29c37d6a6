"""Number parsing helpers shared by every numeric-accepting operation."""
