"""
Prefect flows for the data pipeline.

Flows:
- fetch: Copy CSV extracts and download the county GeoJSON into the store
- build: Parse, join and analyze cached inputs into derived/*.json

Usage (local):
    python -m county_atlas.flows.fetch
    python -m county_atlas.flows.build

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'fetch-data/default'
"""
