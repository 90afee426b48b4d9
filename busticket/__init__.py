"""Bengaluru bus ticketing backend."""
