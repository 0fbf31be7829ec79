"""Validate, track and export editorial content bundles."""
