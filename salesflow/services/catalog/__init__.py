"""Catalog services: customers, products and the transport fleet."""
