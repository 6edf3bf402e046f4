"""FastAPI dashboard rendering the parity board."""
