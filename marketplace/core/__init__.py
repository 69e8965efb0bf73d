"""
Cross-cutting concerns: exceptions and their HTTP rendering, security helpers, rate limiting.
"""
