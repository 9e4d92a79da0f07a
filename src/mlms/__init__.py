"""MLMS - Music Library Management Service."""

__version__ = "1.0.0"
