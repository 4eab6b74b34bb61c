"""Business services: collection, storage, caching, serving and chat."""
