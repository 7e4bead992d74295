"""Boundary layers over backend.Engine: the Flask app (web) and the CLI (__main__)."""
