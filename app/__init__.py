"""LeafLens AI session host."""
