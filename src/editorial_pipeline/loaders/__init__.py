"""Loaders for content bundles."""

from .bundle_loader import BundleLoader, load_bundle

__all__ = ["BundleLoader", "load_bundle"]
