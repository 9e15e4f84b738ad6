"""Application layer: DTOs, repository ports, and pure helpers."""
