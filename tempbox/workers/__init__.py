"""
Workers Module

Background tasks run inside the application lifespan.
"""
