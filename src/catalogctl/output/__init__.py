"""Output formatting for ServiceResult (human via Rich, or JSON)."""
