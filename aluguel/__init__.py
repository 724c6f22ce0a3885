"""
Aggregates rental listings from several Brazilian real-estate sites.
"""
