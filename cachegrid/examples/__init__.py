"""Example applications built on cachegrid."""
