"""
Agent implementations for DishPulse.

Contains the modules a search flows through:
- Ingestion (Reddit search client)
- Mention Extraction
- Mention Aggregation and Results Export
- Sentiment scoring and combination
- Place Lookup (Google Maps links)
"""
