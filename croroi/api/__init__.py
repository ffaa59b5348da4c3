"""Calculator composition (calculator.py) and the Flask app (server.py)."""
