"""
Slide Constraints - Services
"""
