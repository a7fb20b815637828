"""Built-in sample datasets."""
