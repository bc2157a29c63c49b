"""Office-scoped service layer with tag-based cache memoization and invalidation."""
