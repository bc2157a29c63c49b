"""Domain: exceptions, base entities and pagination."""
