"""Medicine schedule service for the healthcare administration platform"""

__version__ = "1.0.0"
