"""
Models package for Microfeed API
"""
from microfeed.db.base import Base, BaseModel
from microfeed.models.profile import Profile
from microfeed.models.post import Post
from microfeed.models.follow import Follow
from microfeed.models.like import Like
from microfeed.models.hashtag import Hashtag, PostHashtag
from microfeed.models.mention import Mention
from microfeed.models.link_preview import LinkPreview, PostLink

__all__ = [
    'Base',
    'BaseModel',
    'Profile',
    'Post',
    'Follow',
    'Like',
    'Hashtag',
    'PostHashtag',
    'Mention',
    'LinkPreview',
    'PostLink',
]
