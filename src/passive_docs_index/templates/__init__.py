"""Bundled documentation templates, one per supported framework."""
