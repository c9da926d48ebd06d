"""GraphQL operation builders and response parsers."""
