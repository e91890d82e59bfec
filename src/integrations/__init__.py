"""Third-party service integrations (identity provider and AI content)."""
