"""
geobridge — Geocoding Provider Aggregator
=========================================
Hexagonal (Ports & Adapters) architecture.

Layer map
─────────────────────────────────────────────────────
  config/       All tuneable settings (env / .env driven)
  domain/       Pure business objects (queries, addresses, exceptions) — no I/O
  ports/        Abstract interfaces (Python Protocols)
  adapters/     Concrete providers, cache stores and dumpers
  services/     Registry, cache policy, aggregator, DI container
  interfaces/   Delivery layer: CLI
  tests/        Test suite: unit / integration

Adding a geocoding backend:
  1. Write a new adapter in adapters/ implementing ProviderPort
  2. Add its name to _build_provider() in services/container.py
  3. List it in GEOCODER_PROVIDERS — zero other files touched
"""
__version__ = "1.0.0"
