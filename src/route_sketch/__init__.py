"""Sketch, measure and share geographic routes."""
