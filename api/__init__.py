"""linebasic HTTP API."""
