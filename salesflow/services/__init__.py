"""
Service layer: authorization, pricing, catalog, auth and the order lifecycle.
"""
