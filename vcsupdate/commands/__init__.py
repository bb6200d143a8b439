"""Click commands for the vcsupdate CLI."""
