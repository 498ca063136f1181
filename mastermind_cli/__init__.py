"""Interactive command-line client for a remote MasterMind game server."""
