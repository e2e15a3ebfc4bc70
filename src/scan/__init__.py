"""Module file discovery."""
