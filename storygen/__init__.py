"""storygen: mock props extraction and Storybook prompt building for React components."""

__version__ = "0.1.0"
