"""Reward tiers and achievements shown on the impact dashboard.

Redemption is not offered yet; the dashboard only reports what a user has
unlocked and how many points each tier still needs.
"""

from collections import namedtuple

RewardTier = namedtuple('RewardTier', 'code title description cost')
Achievement = namedtuple('Achievement', 'code title description')

REWARD_TIERS = (
    RewardTier('discount_10', '10% Off Next Purchase', 'Get 10% discount on your next order', 100),
    RewardTier('plant_5_trees', 'Plant 5 Trees', 'Fund tree plantation in your name', 200),
    RewardTier('free_product', 'Free Eco Product', 'Get a free eco-friendly product', 500),
)

FIRST_PURCHASE = Achievement('first_purchase', 'First Eco Purchase', 'Started your journey!')
ECO_WARRIOR = Achievement('eco_warrior', 'Eco Warrior Badge', '10+ sustainable purchases')
TREE_PLANTER = Achievement('tree_planter', 'Tree Planter', 'Funded 5 or more trees')


def reward_progress(green_points):
    """Each tier with whether it is unlocked and the points still needed."""
    points = green_points or 0
    return [{
        'code': tier.code,
        'title': tier.title,
        'description': tier.description,
        'cost': tier.cost,
        'unlocked': points >= tier.cost,
        'points_needed': max(0, tier.cost - points),
    } for tier in REWARD_TIERS]


def earned_achievements(stats):
    earned = []
    if stats is None:
        return earned
    if stats.total_orders >= 1:
        earned.append(FIRST_PURCHASE)
    if stats.total_orders >= 10:
        earned.append(ECO_WARRIOR)
    if stats.trees_funded >= 5:
        earned.append(TREE_PLANTER)
    return [a._asdict() for a in earned]
