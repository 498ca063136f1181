"""Remote MasterMind API: wire models and the HTTP client."""
