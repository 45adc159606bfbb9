"""Translation workflow: prompts, response parsing, review and analytics."""
