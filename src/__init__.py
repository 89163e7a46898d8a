"""IELTS config service."""
