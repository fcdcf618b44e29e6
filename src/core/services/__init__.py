"""Services: the relabeling pipeline and its scheduler and rewriter."""
