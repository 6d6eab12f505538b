"""Interview preparation tracker: sprint generation, reconciliation and progress."""
