"""Cars app package.

The car catalog: brand, model, year, daily price and an availability
flag, with public listing and a free-text search over brand and model.
"""
