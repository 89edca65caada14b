"""Service layer for focusledger."""
