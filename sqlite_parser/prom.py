from prometheus_client import CollectorRegistry

# Dedicated registry so the service exposes only its own series.
REGISTRY = CollectorRegistry(auto_describe=True)
