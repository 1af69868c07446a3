"""LazyMint backend services"""
