"""Business logic services.

Services contain the cache-aside logic and are called by routes.
Services accept their stores explicitly.
"""
