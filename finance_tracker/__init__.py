"""Finance tracker dashboard engine."""
