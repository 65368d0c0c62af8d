"""Payment link creation and webhook reconciliation."""
