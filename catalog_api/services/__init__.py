"""Business logic services.

Services contain all query/aggregation logic and are called by routes.
Services are pure where possible and accept their stores explicitly.
"""
