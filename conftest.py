"""
Pytest configuration shared by every test module.
Selects the in-memory SQLite database before any application module is imported.
"""
import os

# Set testing environment before importing app
os.environ["TESTING"] = "True"
os.environ["DEBUG"] = "False"
os.environ.setdefault("LOG_LEVEL", "WARNING")
