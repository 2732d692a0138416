"""CLI command implementations for depbump."""
