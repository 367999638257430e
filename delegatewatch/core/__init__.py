"""Monitor core: the stateful diffing and status-derivation engine."""
