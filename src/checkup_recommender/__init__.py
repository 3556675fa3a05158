"""
Checkup recommender
Builds a personalized health-checkup list and flags candidate disease risks
from age, gender and lifestyle tags.
"""

from .engine import Recommendation, RecommendationEngine, get_engine
from .planner import DisplayCheckupItem, ItemSource, Priority
from .profile import Gender, LifestyleTagKey, Profile, build_profile
from .reference import ReferenceDataError, ReferenceTables

__all__ = [
    'Recommendation', 'RecommendationEngine', 'get_engine',
    'DisplayCheckupItem', 'ItemSource', 'Priority',
    'Gender', 'LifestyleTagKey', 'Profile', 'build_profile',
    'ReferenceDataError', 'ReferenceTables',
]
