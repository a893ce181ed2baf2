"""
scoring/: Scientific Productivity Scoring Engine

Modules:
    rules.py              - Per-category point rules and annual bonuses
    points_calculator.py  - One researcher's ScoreBreakdown
    pool.py               - Bounded-concurrency fan-out (pooled_map)
    population.py         - Population and per-department score batches
    ranking.py            - Ordering, overall and department rank
    similarity.py         - Activity-count similarity between researchers
    criteria.py           - Criteria leaderboards over activity counts
    utils.py              - Decimal rounding helpers
"""
