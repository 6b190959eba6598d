"""pubflow: bump, tag, build and publish a Python package in one go."""
