"""Services Layer — request handlers composing the item store and the translator.

Invariants:
    - Handlers are async because the store is; everything they call besides
      the store is pure
"""
