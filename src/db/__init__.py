"""Persistence: async engine, catalog models and seeding."""
