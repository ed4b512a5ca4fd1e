"""Configuration for birdproxy."""
