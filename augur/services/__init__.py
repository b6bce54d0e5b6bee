"""External intelligence services used by the research tools."""
