"""
Polite retailer crawling: robots.txt, rate limiting, retry and activity logging.
"""
