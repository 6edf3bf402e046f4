"""Dashboard routers: pages, JSON API and WebSocket."""
