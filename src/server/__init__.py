"""HTTP and WebSocket access to a running simulation."""
