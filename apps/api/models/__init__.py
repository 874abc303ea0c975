"""Models package."""

from .user import User
from .password_reset import PasswordReset
from .blog import Blog
from .portfolio import Portfolio
from .content_analysis import ContentAnalysis
from .user_interest import UserInterest
from .community_analytics import CommunityAnalytics
