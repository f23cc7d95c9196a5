"""Core traversal, dispatch and collection logic for cleanrec."""
