"""
Command-line interface modules.

Provides CLI entry points for:
- estimate: Estimate a property's monthly rent
- api_server: Start the REST API
"""
