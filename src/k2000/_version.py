__version__ = "2025.8.11"
