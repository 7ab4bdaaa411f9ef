"""options — pydantic schemas for the options each CLI operation accepts."""
