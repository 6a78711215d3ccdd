"""Job store and lifecycle service."""
