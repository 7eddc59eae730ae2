"""Multi-tenant banking API: ledger and authorization core."""
