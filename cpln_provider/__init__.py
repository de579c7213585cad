"""cpln-provider - declarative Control Plane secrets and domain routes"""

__version__ = "1.0.0"
