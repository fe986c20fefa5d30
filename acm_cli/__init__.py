"""Command line tools for the ACM ledger file system."""
