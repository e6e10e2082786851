"""
Infrastructure Layer Package

Concrete adapters for the outside world. Only the Particle cloud HTTP
gateway lives here.
"""
