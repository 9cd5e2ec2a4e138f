"""Matplotlib front end. Import lazily: pulling in pyplot selects a backend."""
