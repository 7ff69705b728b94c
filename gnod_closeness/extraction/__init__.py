"""Per-document extraction: item list, embedded matrix, edge table."""
