"""Application layer: services and adapters orchestrating the boundary."""
