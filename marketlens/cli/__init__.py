"""
Terminal dashboard for the MarketLens API
"""
