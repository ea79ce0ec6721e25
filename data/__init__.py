"""Seed data and CSV ingestion for the food catalogue."""
