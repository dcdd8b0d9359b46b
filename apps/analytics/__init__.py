"""Staff dashboard counters."""
