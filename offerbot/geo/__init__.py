"""
Pure distance and geometry helpers used when building offer queries.
"""
