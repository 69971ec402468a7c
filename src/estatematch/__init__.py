"""
EstateMatch - Matchmaking entre clientes y propiedades para inmobiliarias.
"""

__version__ = "0.1.0"
