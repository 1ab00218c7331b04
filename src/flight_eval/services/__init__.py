"""Dataset, extraction provider and extraction store services."""
