"""
Dish recommendation and ranking engine.

Responsibilities:
- Score in-stock dishes against a user's orders, favorites and diet.
- Backfill short personalised lists with popular dishes.
- Rank similar, trending, new and order-history dishes.
- Stay pure: every ranking is recomputed from the snapshot it is given.
"""
