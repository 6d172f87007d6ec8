"""Workout generation, muscle-recovery estimation and exercise substitution."""
