"""Application layer: use-case services orchestrating boundaries and domain logic."""
