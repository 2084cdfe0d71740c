"""Application features: commands, queries, validators and handlers."""
