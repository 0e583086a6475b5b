"""Fractal evaluation, camera and gradient types."""
