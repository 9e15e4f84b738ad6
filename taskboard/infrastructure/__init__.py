"""Infrastructure: hosted database client, in-memory backend, repositories, security."""
