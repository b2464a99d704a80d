"""
Behavioral history accessor.

Responsibilities:
- Load delivered order line items, favorites and dietary preferences.
- Assemble a per-user ``UserHistory`` snapshot for personalised ranking.
- Expose all delivered line items for trending aggregation.
"""
