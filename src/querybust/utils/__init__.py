"""Utility helpers for querybust."""
