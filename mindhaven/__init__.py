"""MindHaven mental-wellness API."""
