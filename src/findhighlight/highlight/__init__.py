"""Pattern compilation, match location, offset reconciliation and splicing."""
