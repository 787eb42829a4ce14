"""kittytap commands registered on the ReplKit2 app."""
