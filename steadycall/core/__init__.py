"""steadycall core: exceptions, logging, configuration, metrics and patterns."""
