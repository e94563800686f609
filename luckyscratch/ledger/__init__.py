"""Client and reconciliation for the remote win ledger."""
