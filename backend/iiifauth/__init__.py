"""IIIF access-control negotiation for info.json resources."""
